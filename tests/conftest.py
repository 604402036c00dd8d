"""
Pytest fixtures for the chunking engine tests.

Chunk sizes are measured with a deterministic whitespace tokenizer (one
token per word), so expected chunk boundaries can be worked out by hand.
"""

from typing import Callable, Optional, Sequence

import pytest

from ingestion import ChunkerOptions


class WhitespaceTokenizer:
    """One token per whitespace-separated word; decode joins with spaces."""

    def __init__(self):
        self._ids: dict[str, int] = {}
        self._words: list[str] = []

    def count_tokens(self, text: str) -> int:
        return len(text.split())

    def encode(self, text: str) -> list[int]:
        tokens = []
        for word in text.split():
            if word not in self._ids:
                self._ids[word] = len(self._words)
                self._words.append(word)
            tokens.append(self._ids[word])
        return tokens

    def decode(self, tokens: Sequence[int]) -> str:
        return " ".join(self._words[t] for t in tokens)


class ByteTokenizer:
    """One token per UTF-8 byte; decoding replaces broken characters."""

    def count_tokens(self, text: str) -> int:
        return len(text.encode("utf-8"))

    def encode(self, text: str) -> list[int]:
        return list(text.encode("utf-8"))

    def decode(self, tokens: Sequence[int]) -> str:
        return bytes(tokens).decode("utf-8", errors="replace")


class ScriptedEmbeddingGenerator:
    """
    Embedding generator returning vectors chosen by a callback.

    The callback receives the index of each text within the batch.
    """

    def __init__(self, vector_for: Optional[Callable[[int, str], list[float]]] = None):
        self.vector_for = vector_for or (lambda index, text: [1.0, 2.0, 3.0, 4.0])
        self.calls: list[list[str]] = []

    async def generate(self, texts: Sequence[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [self.vector_for(i, text) for i, text in enumerate(texts)]


@pytest.fixture
def tokenizer() -> WhitespaceTokenizer:
    return WhitespaceTokenizer()


@pytest.fixture
def make_options(tokenizer):
    """Build ChunkerOptions over the whitespace tokenizer."""

    def _make(max_tokens_per_chunk: int = 2000, overlap_tokens: Optional[int] = None) -> ChunkerOptions:
        return ChunkerOptions(
            tokenizer=tokenizer,
            max_tokens_per_chunk=max_tokens_per_chunk,
            overlap_tokens=overlap_tokens,
        )

    return _make


@pytest.fixture
def embedding_generator() -> ScriptedEmbeddingGenerator:
    return ScriptedEmbeddingGenerator()


@pytest.fixture
def scripted_generator():
    """Factory for generators with a custom vector callback."""
    return ScriptedEmbeddingGenerator


@pytest.fixture
def byte_tokenizer() -> ByteTokenizer:
    return ByteTokenizer()
