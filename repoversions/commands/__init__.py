"""CLI command handlers for repoversions."""
