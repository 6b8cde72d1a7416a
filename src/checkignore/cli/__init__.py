"""Command-line interface for checkignore."""
