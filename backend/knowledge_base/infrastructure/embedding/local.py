"""Local sentence-transformers embedding provider."""

import asyncio
from typing import List, Optional, cast

from sentence_transformers import SentenceTransformer

from .base import EmbeddingProvider


class SentenceTransformerProvider(EmbeddingProvider):
    """Embed text with a sentence-transformers model loaded in-process.

    The model is loaded on first use, once, under an ``asyncio.Lock``;
    loading and encoding run in worker threads so the event loop stays free.
    """

    def __init__(self, model_name: str = "sentence-transformers/all-MiniLM-L6-v2", normalize: bool = True):
        super().__init__(model_name)
        self.normalize = normalize
        self._model: Optional[SentenceTransformer] = None
        self._model_lock = asyncio.Lock()

    async def _get_model(self) -> SentenceTransformer:
        if self._model is None:
            async with self._model_lock:
                if self._model is None:
                    self._model = cast(SentenceTransformer, await asyncio.to_thread(SentenceTransformer, self.model_name))
        return self._model

    async def embed(self, text: str) -> List[float]:
        model = await self._get_model()
        embedding = await asyncio.to_thread(
            model.encode,
            text,
            convert_to_tensor=False,
            normalize_embeddings=self.normalize,
        )
        return cast(List[float], embedding.tolist())

    @property
    def is_loaded(self) -> bool:
        return self._model is not None
