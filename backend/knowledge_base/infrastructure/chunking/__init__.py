"""Text chunking for document ingestion."""

from .splitter import DEFAULT_SEPARATORS, RecursiveTextSplitter

__all__ = ["DEFAULT_SEPARATORS", "RecursiveTextSplitter"]
