"""
Tokenizer contract and the tiktoken adapter used to measure chunk sizes.

The chunkers only need three operations from a tokenizer: count the tokens
of a text, encode a text into token ids, and decode token ids back to text.
Anything providing them can be passed to ChunkerOptions.

TiktokenTokenizer wraps a tiktoken encoding. cl100k_base is the default; it
tends to produce slightly higher counts than SentencePiece tokenizers, which
is a safe margin when the chunk size is a hard limit.

Usage:
    from ingestion.tokenizer import TiktokenTokenizer, count_tokens

    tokenizer = TiktokenTokenizer.for_model("gpt-4o")
    n = tokenizer.count_tokens("This is an example sentence.")
    n = count_tokens("Uses the shared default encoder.")
"""

from typing import Protocol, Sequence, runtime_checkable

import tiktoken

DEFAULT_ENCODING = "cl100k_base"


@runtime_checkable
class Tokenizer(Protocol):
    def count_tokens(self, text: str) -> int: ...

    def encode(self, text: str) -> list[int]: ...

    def decode(self, tokens: Sequence[int]) -> str: ...


class TiktokenTokenizer:
    """Tokenizer backed by a tiktoken encoding."""

    def __init__(self, encoding_name: str = DEFAULT_ENCODING):
        self.encoding_name = encoding_name
        self._encoding = tiktoken.get_encoding(encoding_name)

    @classmethod
    def for_model(cls, model: str) -> "TiktokenTokenizer":
        """Create a tokenizer using the encoding tiktoken maps to a model name."""
        encoding = tiktoken.encoding_for_model(model)
        return cls(encoding.name)

    def count_tokens(self, text: str) -> int:
        if not text:
            return 0
        return len(self._encoding.encode(text))

    def encode(self, text: str) -> list[int]:
        if not text:
            return []
        return self._encoding.encode(text)

    def decode(self, tokens: Sequence[int]) -> str:
        return self._encoding.decode(list(tokens))

    def __repr__(self) -> str:
        return f"TiktokenTokenizer({self.encoding_name!r})"


# Shared default tokenizer - created on first use, reused across calls.
_default_tokenizer: TiktokenTokenizer | None = None


def get_default_tokenizer() -> TiktokenTokenizer:
    """Get or initialize the shared cl100k_base tokenizer."""
    global _default_tokenizer
    if _default_tokenizer is None:
        _default_tokenizer = TiktokenTokenizer(DEFAULT_ENCODING)
    return _default_tokenizer


def count_tokens(text: str, tokenizer: Tokenizer | None = None) -> int:
    """
    Count the number of tokens in a text string.

    Args:
        text: The text to tokenize.
        tokenizer: Tokenizer to use; the shared default when omitted.

    Returns:
        Number of tokens.
    """
    if not text:
        return 0
    return (tokenizer or get_default_tokenizer()).count_tokens(text)
