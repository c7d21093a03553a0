"""Ingestion and retrieval over an owner's documents."""
