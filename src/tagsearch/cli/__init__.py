"""Command-line interface for tagsearch."""
