"""Tests for the Hugging Face Inference API provider."""

import json

import httpx
import pytest

from knowledge_base.infrastructure.embedding import EmbeddingOk, HuggingFaceInferenceProvider, ModelFailed

MODEL = "sentence-transformers/all-MiniLM-L6-v2"


def make_provider(handler, api_key: str = "hf_test") -> HuggingFaceInferenceProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HuggingFaceInferenceProvider(MODEL, api_key=api_key, api_url="https://hf.test/models/", client=client)


class TestHuggingFaceInferenceProvider:
    @pytest.mark.asyncio
    async def test_posts_text_to_feature_extraction_pipeline(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=[0.1, 0.2, 0.3])

        vector = await make_provider(handler).embed("refund window")

        assert vector == [0.1, 0.2, 0.3]
        assert seen["url"] == f"https://hf.test/models/{MODEL}/pipeline/feature-extraction"
        assert seen["auth"] == "Bearer hf_test"
        assert seen["body"] == {"inputs": "refund window"}

    @pytest.mark.asyncio
    async def test_anonymous_without_api_key(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=[1.0])

        await make_provider(handler, api_key="").embed("x")
        assert seen["auth"] is None

    @pytest.mark.asyncio
    async def test_nested_response_uses_first_row(self):
        provider = make_provider(lambda request: httpx.Response(200, json=[[0.5, 0.25], [9.0, 9.0]]))
        assert await provider.embed("x") == [0.5, 0.25]

    @pytest.mark.asyncio
    async def test_http_error_is_a_failed_attempt(self):
        provider = make_provider(lambda request: httpx.Response(503, json={"error": "loading"}))

        outcome = await provider.attempt("x", timeout=1.0, dimension=2)

        assert isinstance(outcome, ModelFailed)
        assert outcome.model == MODEL
        assert "503" in outcome.reason

    @pytest.mark.asyncio
    async def test_successful_attempt(self):
        provider = make_provider(lambda request: httpx.Response(200, json=[[0.5, 0.25]]))
        outcome = await provider.attempt("x", timeout=1.0, dimension=2)
        assert outcome == EmbeddingOk(vector=[0.5, 0.25], model=MODEL)

    @pytest.mark.parametrize("payload", [{}, [], [[]], ["a", "b"], [True, False]])
    def test_rejects_malformed_payloads(self, payload):
        with pytest.raises(ValueError):
            HuggingFaceInferenceProvider.extract_vector(payload)

    @pytest.mark.asyncio
    async def test_aclose_closes_client(self):
        provider = make_provider(lambda request: httpx.Response(200, json=[0.5]))
        client = provider._client

        await provider.aclose()
        await provider.aclose()

        assert client.is_closed
