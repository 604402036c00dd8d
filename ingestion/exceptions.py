"""
Custom Exceptions for the Chunking Engine.

Configuration problems (bad token budgets, missing tokenizer) surface as
pydantic validation errors from ChunkerOptions. Everything that goes wrong
while a document is being chunked derives from ChunkingError.

Exception Hierarchy:
    ChunkingError (base)
    ├── DocumentRequiredError
    ├── IrreducibleContentError
    ├── ChunkingCancelledError
    └── EmbeddingError

Usage:
    from ingestion.exceptions import ChunkingError, IrreducibleContentError

    try:
        chunks = await chunk_document(chunker, document)
    except IrreducibleContentError as e:
        print(f"{e.unit!r} needs {e.tokens} tokens, budget is {e.budget}")
    except ChunkingError as e:
        print(f"Chunking failed: {e}")
"""

from __future__ import annotations

from typing import Optional


class ChunkingError(Exception):
    """
    Base exception for all chunking errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A chunking error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


class DocumentRequiredError(ChunkingError):
    """Raised when a chunker is asked to process no document at all."""

    def __init__(self):
        super().__init__("A document is required for chunking")


class IrreducibleContentError(ChunkingError):
    """
    Raised when a unit that cannot be split further does not fit the budget.

    Such units are a header breadcrumb, or a table's header line, separator
    line and first data row. They are never truncated.

    Attributes:
        unit: The offending text (context breadcrumb or table prefix)
        tokens: Tokens the unit needs
        budget: Tokens that were available for it
    """

    def __init__(self, unit: str, tokens: int, budget: int, details: Optional[str] = None):
        self.unit = unit
        self.tokens = tokens
        self.budget = budget
        preview = unit if len(unit) <= 80 else unit[:77] + "..."
        super().__init__(
            f"Content cannot be split to fit {budget} tokens "
            f"(needs {tokens}): {preview!r}",
            details,
        )


class ChunkingCancelledError(ChunkingError):
    """Raised when the caller signals cancellation during a chunking run."""

    def __init__(self, document_id: Optional[str] = None):
        self.document_id = document_id
        message = "Chunking was cancelled"
        if document_id:
            message = f"{message} [{document_id}]"
        super().__init__(message)


class EmbeddingError(ChunkingError):
    """
    Raised when the embedding generator returns an unusable result.

    Attributes:
        expected: Number of vectors requested
        received: Number of vectors returned
    """

    def __init__(self, expected: int, received: int):
        self.expected = expected
        self.received = received
        super().__init__(
            f"Embedding generator returned {received} vectors for {expected} inputs"
        )
