"""Text-to-vector conversion: provider chain plus hash fallback."""

from .base import EmbeddingOk, EmbeddingOutcome, EmbeddingProvider, ModelFailed
from .fallback import FALLBACK_MODEL_NAME, hash_embedding
from .huggingface import HuggingFaceInferenceProvider
from .service import Embedder, EmbeddingResult, build_providers, get_embedder

__all__ = [
    "FALLBACK_MODEL_NAME",
    "Embedder",
    "EmbeddingOk",
    "EmbeddingOutcome",
    "EmbeddingProvider",
    "EmbeddingResult",
    "HuggingFaceInferenceProvider",
    "ModelFailed",
    "build_providers",
    "get_embedder",
    "hash_embedding",
]
