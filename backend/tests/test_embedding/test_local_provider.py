"""Tests for the sentence-transformers provider."""

import asyncio
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

pytest.importorskip("sentence_transformers")

from knowledge_base.infrastructure.embedding.local import SentenceTransformerProvider  # noqa: E402


class TestSentenceTransformerProvider:
    @pytest.fixture
    def provider(self):
        return SentenceTransformerProvider(model_name="test-model")

    @pytest.fixture
    def mock_model(self):
        model = MagicMock()
        model.encode.return_value = np.array([0.1, 0.2, 0.3, 0.4])
        return model

    @pytest.mark.asyncio
    async def test_model_loaded_lazily_and_once(self, provider, mock_model):
        with patch("asyncio.to_thread") as mock_to_thread:
            mock_to_thread.return_value = mock_model

            assert provider.is_loaded is False
            first = await provider._get_model()
            second = await provider._get_model()

            assert first is mock_model
            assert second is mock_model
            mock_to_thread.assert_called_once()

    @pytest.mark.asyncio
    async def test_concurrent_loads_share_one_model(self, provider, mock_model):
        async def slow_load(*args, **kwargs):
            await asyncio.sleep(0.01)
            return mock_model

        with patch("asyncio.to_thread", side_effect=slow_load) as mock_to_thread:
            results = await asyncio.gather(*(provider._get_model() for _ in range(3)))

        assert all(result is mock_model for result in results)
        assert mock_to_thread.call_count == 1

    @pytest.mark.asyncio
    async def test_embed_returns_list(self, provider, mock_model):
        provider._model = mock_model

        vector = await provider.embed("course catalogue")

        assert vector == pytest.approx([0.1, 0.2, 0.3, 0.4])
        mock_model.encode.assert_called_once_with(
            "course catalogue", convert_to_tensor=False, normalize_embeddings=True
        )

    @pytest.mark.asyncio
    async def test_attempt_checks_dimension(self, provider, mock_model):
        provider._model = mock_model
        outcome = await provider.attempt("course", timeout=5.0, dimension=384)
        assert outcome.reason == "returned 4 dimensions, expected 384"
