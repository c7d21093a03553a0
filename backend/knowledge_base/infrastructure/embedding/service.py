"""Embedding with an ordered provider chain and a deterministic fallback."""

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Sequence

import httpx

from ...modules.common.exceptions import EmbeddingUnavailableError
from ..config.settings import EmbeddingBackend, get_settings
from ..logging import get_logger
from .base import EmbeddingOk, EmbeddingProvider, ModelFailed
from .fallback import FALLBACK_MODEL_NAME, hash_embedding
from .huggingface import HuggingFaceInferenceProvider

logger = get_logger(__name__)


@dataclass(frozen=True)
class EmbeddingResult:
    """A vector plus where it came from."""

    vector: List[float]
    model: str
    fallback: bool = False


class Embedder:
    """Turn text into fixed-dimension vectors.

    Providers are tried in order; the first ``EmbeddingOk`` wins. When every
    provider fails, the deterministic hash embedding is used (tagged
    ``fallback=True``) unless the fallback is disabled, in which case
    ``EmbeddingUnavailableError`` is raised.

    Example:
        ```python
        embedder = Embedder(providers=[HuggingFaceInferenceProvider("sentence-transformers/all-MiniLM-L6-v2")])
        result = await embedder.embed("quarterly revenue figures")
        result.vector, result.fallback
        ```
    """

    def __init__(
        self,
        providers: Optional[Sequence[EmbeddingProvider]] = None,
        dimension: int = 384,
        timeout: float = 30.0,
        fallback_enabled: bool = True,
    ):
        """Initialize the embedder.

        Args:
            providers: Providers in priority order. May be empty.
            dimension: Length every returned vector must have.
            timeout: Per-provider attempt timeout in seconds.
            fallback_enabled: Use the hash embedding when all providers fail.
        """
        if dimension < 1:
            raise ValueError(f"dimension must be positive, got {dimension}")
        self.providers = list(providers or [])
        self.dimension = dimension
        self.timeout = timeout
        self.fallback_enabled = fallback_enabled

    async def embed(self, text: str) -> EmbeddingResult:
        """Embed a single text.

        Args:
            text: Text to embed. Empty text is allowed.

        Returns:
            The embedding and the name of the model that produced it.

        Raises:
            EmbeddingUnavailableError: If every provider failed and the
                fallback is disabled.
        """
        failures: List[ModelFailed] = []
        for provider in self.providers:
            outcome = await provider.attempt(text, timeout=self.timeout, dimension=self.dimension)
            if isinstance(outcome, EmbeddingOk):
                return EmbeddingResult(vector=outcome.vector, model=outcome.model)
            logger.warning(f"Embedding model {outcome.model} failed, trying next: {outcome.reason}")
            failures.append(outcome)

        if not self.fallback_enabled:
            raise EmbeddingUnavailableError(
                "All embedding models failed",
                details={"failures": [{"model": f.model, "reason": f.reason} for f in failures]},
            )

        if self.providers:
            logger.warning(f"All {len(self.providers)} embedding models failed, using hash fallback")
        return EmbeddingResult(vector=hash_embedding(text, self.dimension), model=FALLBACK_MODEL_NAME, fallback=True)

    async def embed_many(self, texts: Sequence[str]) -> List[EmbeddingResult]:
        """Embed several texts one by one, preserving order."""
        return [await self.embed(text) for text in texts]

    async def aclose(self) -> None:
        """Close every provider in the chain."""
        for provider in self.providers:
            await provider.aclose()


def build_providers() -> List[EmbeddingProvider]:
    """Instantiate the configured provider chain.

    Hugging Face providers share one HTTP client; ``Embedder.aclose`` closes it.
    """
    settings = get_settings()
    models = settings.EMBEDDING_MODELS_LIST

    if settings.EMBEDDING_BACKEND == EmbeddingBackend.SENTENCE_TRANSFORMERS:
        from .local import SentenceTransformerProvider

        return [SentenceTransformerProvider(model) for model in models]

    client = httpx.AsyncClient(timeout=settings.EMBEDDING_TIMEOUT_SECONDS)
    return [
        HuggingFaceInferenceProvider(
            model, api_key=settings.HUGGINGFACE_API_KEY, api_url=settings.HUGGINGFACE_API_URL, client=client
        )
        for model in models
    ]


@lru_cache()
def get_embedder() -> Embedder:
    """Get the process-wide embedder built from settings."""
    settings = get_settings()
    return Embedder(
        providers=build_providers(),
        dimension=settings.EMBEDDING_DIMENSION,
        timeout=settings.EMBEDDING_TIMEOUT_SECONDS,
        fallback_enabled=settings.EMBEDDING_FALLBACK_ENABLED,
    )
