"""Input helpers."""
