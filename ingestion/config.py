"""
Configuration for the chunkers and the chunking service.

ChunkerOptions ties a token budget to the tokenizer that measures it. It is
validated on construction and again on every assignment, so options can
never hold a budget that the overlap does not fit into.
"""

import os
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

DEFAULT_MAX_TOKENS_PER_CHUNK = 2000
DEFAULT_OVERLAP_TOKENS = 500

STRATEGIES = ("section", "header", "markdown", "token", "semantic")


class ChunkerOptions(BaseModel):
    """
    Token budget settings shared by all chunkers.

    overlap_tokens defaults to 500 when max_tokens_per_chunk leaves room for
    it, and to 0 otherwise. It is only used by the token-window chunker.
    """
    model_config = ConfigDict(validate_assignment=True)

    tokenizer: Any = Field(
        ...,
        description="Tokenizer measuring chunk sizes (count_tokens/encode/decode)",
        exclude=True,
    )
    max_tokens_per_chunk: int = Field(
        DEFAULT_MAX_TOKENS_PER_CHUNK,
        description="Maximum tokens per chunk",
        gt=0,
    )
    overlap_tokens: int = Field(
        DEFAULT_OVERLAP_TOKENS,
        description="Tokens repeated between consecutive token windows",
        ge=0,
    )

    @model_validator(mode="before")
    @classmethod
    def _default_overlap(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("overlap_tokens") is None:
            max_tokens = data.get("max_tokens_per_chunk", DEFAULT_MAX_TOKENS_PER_CHUNK)
            overlap = (
                DEFAULT_OVERLAP_TOKENS
                if isinstance(max_tokens, int) and max_tokens > DEFAULT_OVERLAP_TOKENS
                else 0
            )
            data = {**data, "overlap_tokens": overlap}
        return data

    @field_validator("tokenizer")
    @classmethod
    def _require_tokenizer(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("tokenizer is required")
        for method in ("count_tokens", "encode", "decode"):
            if not callable(getattr(value, method, None)):
                raise ValueError(f"tokenizer must provide {method}()")
        return value

    @model_validator(mode="after")
    def _check_overlap(self) -> "ChunkerOptions":
        if self.overlap_tokens >= self.max_tokens_per_chunk:
            raise ValueError(
                f"overlap_tokens ({self.overlap_tokens}) must be less than "
                f"max_tokens_per_chunk ({self.max_tokens_per_chunk})"
            )
        return self

    def __setattr__(self, name: str, value: Any) -> None:
        # The after-validator runs once the new value is in place; put the old
        # one back when it rejects the combination.
        previous = self.__dict__.get(name)
        try:
            super().__setattr__(name, value)
        except ValidationError:
            self.__dict__[name] = previous
            raise

    def count_tokens(self, text: str) -> int:
        if not text:
            return 0
        return self.tokenizer.count_tokens(text)


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return int(value)


@dataclass
class ChunkingServiceConfig:
    strategy: str = "header"
    max_tokens_per_chunk: int = DEFAULT_MAX_TOKENS_PER_CHUNK
    overlap_tokens: Optional[int] = None
    encoding_name: str = "cl100k_base"
    max_header_level_to_split_on: Optional[int] = None
    similarity_threshold: float = 0.7
    embedding_model: str = "nomic-embed-text"
    ollama_base_url: str = "http://localhost:11434"

    def __post_init__(self) -> None:
        if self.strategy not in STRATEGIES:
            raise ValueError(
                f"Unknown chunking strategy '{self.strategy}'. "
                f"Expected one of: {', '.join(STRATEGIES)}"
            )

    @classmethod
    def from_env(cls) -> "ChunkingServiceConfig":
        """Build the config from INGESTION_* environment variables."""
        defaults = cls()
        return cls(
            strategy=os.environ.get("INGESTION_STRATEGY", defaults.strategy),
            max_tokens_per_chunk=_env_int(
                "INGESTION_MAX_TOKENS_PER_CHUNK", defaults.max_tokens_per_chunk
            ),
            overlap_tokens=_env_int("INGESTION_OVERLAP_TOKENS", defaults.overlap_tokens),
            encoding_name=os.environ.get("INGESTION_ENCODING", defaults.encoding_name),
            max_header_level_to_split_on=_env_int(
                "INGESTION_MAX_HEADER_LEVEL", defaults.max_header_level_to_split_on
            ),
            similarity_threshold=float(
                os.environ.get("INGESTION_SIMILARITY_THRESHOLD", defaults.similarity_threshold)
            ),
            embedding_model=os.environ.get("INGESTION_EMBEDDING_MODEL", defaults.embedding_model),
            ollama_base_url=os.environ.get("OLLAMA_BASE_URL", defaults.ollama_base_url),
        )
