"""Hugging Face Inference API embedding provider."""

from typing import Any, List, Optional

import httpx

from .base import EmbeddingProvider

DEFAULT_API_URL = "https://router.huggingface.co/hf-inference/models"


class HuggingFaceInferenceProvider(EmbeddingProvider):
    """Embed text through the hosted feature-extraction pipeline of one model.

    The API answers either with a flat vector or, for token-level models,
    with a list of vectors; in the latter case the first row is used.
    """

    def __init__(
        self,
        model_name: str,
        api_key: str = "",
        api_url: str = DEFAULT_API_URL,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the provider.

        Args:
            model_name: Hub model id, e.g. ``sentence-transformers/all-MiniLM-L6-v2``.
            api_key: Bearer token. Anonymous requests are sent when empty.
            api_url: Base URL of the inference router.
            client: Shared HTTP client. A private one is created when omitted.
        """
        super().__init__(model_name)
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self.api_url}/{self.model_name}/pipeline/feature-extraction"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def embed(self, text: str) -> List[float]:
        response = await self._get_client().post(self.endpoint, json={"inputs": text}, headers=self._headers())
        response.raise_for_status()
        return self.extract_vector(response.json())

    @staticmethod
    def extract_vector(payload: Any) -> List[float]:
        """Flatten a feature-extraction response to a single vector.

        Raises:
            ValueError: If the payload is not a non-empty numeric vector.
        """
        if isinstance(payload, list) and payload and isinstance(payload[0], list):
            payload = payload[0]
        if not isinstance(payload, list) or not payload:
            raise ValueError(f"unexpected embedding payload: {str(payload)[:200]}")
        if not all(isinstance(x, (int, float)) and not isinstance(x, bool) for x in payload):
            raise ValueError("embedding payload contains non-numeric values")
        return [float(x) for x in payload]

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
