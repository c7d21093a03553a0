"""Document storage."""
