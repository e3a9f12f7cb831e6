"""Input adapters and the file import pipeline."""

from .pipeline import PARSERS, format_for_path, import_file, preview_errors

__all__ = ["PARSERS", "format_for_path", "import_file", "preview_errors"]
