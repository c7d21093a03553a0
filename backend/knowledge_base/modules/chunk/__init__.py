"""Chunk storage."""
