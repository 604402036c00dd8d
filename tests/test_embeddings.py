"""Tests for ingestion.embeddings - OllamaEmbeddingGenerator."""

import pytest
from unittest.mock import AsyncMock, patch

import ollama

from ingestion.embeddings import EmbeddingGenerator, OllamaEmbeddingGenerator


FAKE_EMBEDDING = [0.1] * 768


@pytest.fixture
def mock_client():
    """Create a mock async Ollama client."""
    with patch("ingestion.embeddings.ollama.AsyncClient") as MockClient:
        client = MockClient.return_value
        client.embed = AsyncMock(return_value={"embeddings": [FAKE_EMBEDDING]})
        yield client


@pytest.fixture
def generator(mock_client):
    return OllamaEmbeddingGenerator(model="nomic-embed-text")


class TestGenerate:
    @pytest.mark.asyncio
    async def test_single_batched_call(self, generator, mock_client):
        mock_client.embed.return_value = {
            "embeddings": [FAKE_EMBEDDING, FAKE_EMBEDDING, FAKE_EMBEDDING],
        }
        result = await generator.generate(["Text 1", "Text 2", "Text 3"])

        assert len(result) == 3
        assert all(len(v) == 768 for v in result)
        mock_client.embed.assert_awaited_once_with(
            model="nomic-embed-text", input=["Text 1", "Text 2", "Text 3"]
        )

    @pytest.mark.asyncio
    async def test_sets_dimensions(self, generator):
        assert generator.dimensions is None
        await generator.generate(["Test"])
        assert generator.dimensions == 768

    @pytest.mark.asyncio
    async def test_empty_list(self, generator, mock_client):
        assert await generator.generate([]) == []
        mock_client.embed.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_text_raises(self, generator, mock_client):
        with pytest.raises(ValueError, match="empty"):
            await generator.generate(["Text", ""])
        mock_client.embed.assert_not_called()

    @pytest.mark.asyncio
    async def test_whitespace_only_raises(self, generator):
        with pytest.raises(ValueError, match="empty"):
            await generator.generate(["   "])

    def test_satisfies_protocol(self, generator):
        assert isinstance(generator, EmbeddingGenerator)

    def test_client_uses_base_url(self):
        with patch("ingestion.embeddings.ollama.AsyncClient") as MockClient:
            OllamaEmbeddingGenerator(base_url="http://ollama:11434")
        MockClient.assert_called_once_with(host="http://ollama:11434")


class TestErrors:
    @pytest.mark.asyncio
    async def test_response_error(self, generator, mock_client):
        mock_client.embed.side_effect = ollama.ResponseError("model not found", 404)
        with pytest.raises(RuntimeError, match="nomic-embed-text"):
            await generator.generate(["Test"])

    @pytest.mark.asyncio
    async def test_connection_error(self, generator, mock_client):
        mock_client.embed.side_effect = ConnectionError("Connection refused")
        with pytest.raises(ConnectionError, match="Ollama"):
            await generator.generate(["Test"])

    @pytest.mark.asyncio
    async def test_other_failure(self, generator, mock_client):
        mock_client.embed.side_effect = KeyError("embeddings")
        with pytest.raises(RuntimeError, match="Embedding generation failed"):
            await generator.generate(["Test"])
