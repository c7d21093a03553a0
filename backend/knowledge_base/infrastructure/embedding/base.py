"""Embedding provider contract and attempt outcomes."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Union


@dataclass(frozen=True)
class EmbeddingOk:
    """A provider produced a vector."""

    vector: List[float]
    model: str


@dataclass(frozen=True)
class ModelFailed:
    """A provider could not produce a vector; ``reason`` is human-readable."""

    model: str
    reason: str


EmbeddingOutcome = Union[EmbeddingOk, ModelFailed]


class EmbeddingProvider(ABC):
    """One embedding backend bound to one model.

    Subclasses implement ``embed`` and may raise whatever their client raises;
    ``attempt`` turns every failure into a ``ModelFailed`` so callers can walk a
    priority list without exception handling.
    """

    def __init__(self, model_name: str):
        self.model_name = model_name

    @abstractmethod
    async def embed(self, text: str) -> List[float]:
        """Return the embedding of ``text``.

        Args:
            text: Text to embed.

        Returns:
            The embedding vector.
        """
        pass

    async def attempt(self, text: str, timeout: float, dimension: int) -> EmbeddingOutcome:
        """Run ``embed`` under a timeout and validate the result.

        Args:
            text: Text to embed.
            timeout: Seconds before the attempt is abandoned.
            dimension: Required vector length.

        Returns:
            ``EmbeddingOk`` with the vector, or ``ModelFailed`` with the reason.
        """
        try:
            vector = await asyncio.wait_for(self.embed(text), timeout=timeout)
        except asyncio.TimeoutError:
            return ModelFailed(model=self.model_name, reason=f"timed out after {timeout}s")
        except Exception as e:
            return ModelFailed(model=self.model_name, reason=f"{type(e).__name__}: {e}")

        if len(vector) != dimension:
            return ModelFailed(
                model=self.model_name,
                reason=f"returned {len(vector)} dimensions, expected {dimension}",
            )
        return EmbeddingOk(vector=[float(x) for x in vector], model=self.model_name)

    async def aclose(self) -> None:
        """Release network clients or other resources held by the provider."""
        pass
