"""Exception types raised by ``expense_tracker``.

Missing input files surface as the built-in ``FileNotFoundError`` and invalid
caller arguments as ``ValueError``; only the two domain-specific failures get
their own classes.
"""

from __future__ import annotations


class FormatError(ValueError):
    """A malformed input line or field."""


class PersistenceError(RuntimeError):
    """A single record could not be written to the store."""


__all__ = ["FormatError", "PersistenceError"]
