"""Linear search vector index implementation."""

import math
from typing import List

from .base import ChunkVector, VectorMatch


class LinearSearchIndex:
    """Exact ranking by brute-force cosine similarity.

    Every stored vector is compared with the query, so search is
    O(n * d) and the results are exact. Python's sort is stable, which means
    vectors with equal scores keep their insertion order; callers rely on
    that to break ties by document upload time and chunk index.
    """

    def __init__(self, dimension: int):
        """Initialize the index.

        Args:
            dimension: Length every stored and query vector must have
        """
        self.dimension = dimension
        self.vectors: List[ChunkVector] = []

    def accepts(self, embedding: List[float]) -> bool:
        return len(embedding) == self.dimension

    async def add_vectors(self, vectors: List[ChunkVector]) -> None:
        """Add vectors to the index, keeping their order.

        Raises:
            ValueError: If any vector has the wrong dimension
        """
        for vector in vectors:
            self._validate_embedding(vector.embedding)
        self.vectors.extend(vectors)

    async def search(self, query_embedding: List[float], k: int, similarity_threshold: float) -> List[VectorMatch]:
        """Return up to ``k`` matches scoring strictly above ``similarity_threshold``.

        Args:
            query_embedding: The query vector
            k: Maximum number of matches
            similarity_threshold: Exclusive lower bound on the similarity

        Returns:
            Matches sorted by similarity, highest first
        """
        self._validate_embedding(query_embedding)

        if k <= 0 or not self.vectors:
            return []

        matches = []
        for vector in self.vectors:
            similarity = cosine_similarity(query_embedding, vector.embedding)
            if similarity > similarity_threshold:
                matches.append(VectorMatch(vector=vector, similarity_score=similarity))

        matches.sort(key=lambda match: match.similarity_score, reverse=True)
        return matches[:k]

    def _validate_embedding(self, embedding: List[float]) -> None:
        if not self.accepts(embedding):
            raise ValueError(f"Embedding dimension {len(embedding)} does not match index dimension {self.dimension}")


def cosine_similarity(vec1: List[float], vec2: List[float]) -> float:
    """Cosine of the angle between two vectors.

    Formula: cos(θ) = (A · B) / (||A|| ||B||)

    Returns:
        A score in [-1, 1], or 0.0 when either vector has zero magnitude.
    """
    dot_product = sum(a * b for a, b in zip(vec1, vec2))

    magnitude1 = math.sqrt(sum(a * a for a in vec1))
    magnitude2 = math.sqrt(sum(b * b for b in vec2))

    if magnitude1 == 0.0 or magnitude2 == 0.0:
        return 0.0

    return dot_product / (magnitude1 * magnitude2)
