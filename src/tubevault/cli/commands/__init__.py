"""CLI command groups: search, cache and review."""
