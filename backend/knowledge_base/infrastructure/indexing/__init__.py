"""Vector ranking for knowledge base retrieval."""

from .base import ChunkVector, VectorMatch
from .linear_search import LinearSearchIndex, cosine_similarity

__all__ = [
    "ChunkVector",
    "LinearSearchIndex",
    "VectorMatch",
    "cosine_similarity",
]
