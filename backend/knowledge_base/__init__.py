"""Per-account document knowledge base: ingestion and semantic retrieval."""

__version__ = "0.1.0"
