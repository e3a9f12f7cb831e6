"""Per-format adapters turning file content into parse outcomes."""
