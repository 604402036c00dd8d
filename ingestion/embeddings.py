"""
Embedding generator contract and the Ollama adapter.

The semantic chunker needs one operation: turn a batch of texts into one
vector per text, in order. OllamaEmbeddingGenerator does so against a local
Ollama instance with a single batched request.

Usage:
    from ingestion.embeddings import OllamaEmbeddingGenerator

    generator = OllamaEmbeddingGenerator(model="nomic-embed-text")
    vectors = await generator.generate(["Text 1", "Text 2"])
"""

from typing import Optional, Protocol, Sequence, runtime_checkable

import ollama

from .logging_config import get_logger

logger = get_logger(__name__)


@runtime_checkable
class EmbeddingGenerator(Protocol):
    async def generate(self, texts: Sequence[str]) -> list[list[float]]: ...


class OllamaEmbeddingGenerator:
    """
    Generates text embeddings using a local Ollama model.

    Failures are reported and never retried here; retry policy belongs to
    whoever owns the generator.
    """

    def __init__(
        self,
        model: str = "nomic-embed-text",
        base_url: str = "http://localhost:11434",
    ):
        """
        Initialize the generator.

        Args:
            model: Ollama model name for embeddings.
            base_url: Ollama API base URL.
        """
        self.model = model
        self.base_url = base_url
        self._client = ollama.AsyncClient(host=base_url)
        self._dimensions: Optional[int] = None

    @property
    def dimensions(self) -> Optional[int]:
        """Return the embedding dimensions (available after the first call)."""
        return self._dimensions

    async def generate(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Generate one embedding per text with a single batch request.

        Raises:
            ValueError: If any text is empty.
            ConnectionError: If Ollama is not reachable.
            RuntimeError: If embedding generation fails.
        """
        if not texts:
            return []
        if any(not text or not text.strip() for text in texts):
            raise ValueError("Cannot embed empty text")

        logger.debug("Embedding %d texts with %s", len(texts), self.model)
        try:
            response = await self._client.embed(model=self.model, input=list(texts))
        except ollama.ResponseError as e:
            raise RuntimeError(
                f"Ollama embedding failed for model '{self.model}': {e}"
            ) from e
        except Exception as e:
            if "Connection" in type(e).__name__ or "refused" in str(e).lower():
                raise ConnectionError(
                    f"Cannot connect to Ollama at {self.base_url}. "
                    f"Is Ollama running? Start it with: ollama serve"
                ) from e
            raise RuntimeError(f"Embedding generation failed: {e}") from e

        embeddings = [list(vector) for vector in response["embeddings"]]
        if embeddings:
            self._dimensions = len(embeddings[0])
        return embeddings
