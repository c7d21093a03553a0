"""Deterministic stand-ins for embedding backends."""

import re
from typing import List

from knowledge_base.infrastructure.embedding import EmbeddingProvider

VOCABULARY = ("invoice", "payment", "refund", "shipping", "warranty", "course", "exam", "campus")


class KeywordProvider(EmbeddingProvider):
    """One dimension per vocabulary word, valued by how often the word occurs."""

    def __init__(self, model_name: str = "keyword-test-model"):
        super().__init__(model_name)
        self.calls = 0

    async def embed(self, text: str) -> List[float]:
        self.calls += 1
        words = re.findall(r"[a-z]+", text.lower())
        return [float(words.count(term)) for term in VOCABULARY]


class FailingProvider(EmbeddingProvider):
    """Always raises, like an unreachable backend."""

    def __init__(self, model_name: str = "failing-test-model"):
        super().__init__(model_name)
        self.calls = 0

    async def embed(self, text: str) -> List[float]:
        self.calls += 1
        raise ConnectionError("backend unreachable")
