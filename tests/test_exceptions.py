"""
Tests for chunking exceptions.
"""

import pytest

from ingestion import (
    ChunkingCancelledError,
    ChunkingError,
    DocumentRequiredError,
    EmbeddingError,
    IrreducibleContentError,
)


class TestChunkingError:
    """Tests for base ChunkingError."""

    def test_create_simple(self):
        error = ChunkingError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.details is None

    def test_create_with_details(self):
        error = ChunkingError("Error occurred", details="More info here")
        assert "Error occurred" in str(error)
        assert "More info here" in str(error)
        assert error.details == "More info here"


class TestSpecificErrors:
    def test_document_required(self):
        error = DocumentRequiredError()
        assert "document is required" in str(error)

    def test_irreducible_content(self):
        error = IrreducibleContentError("| a | b |", 12, 10, details="table header")
        assert error.unit == "| a | b |"
        assert error.tokens == 12
        assert error.budget == 10
        assert "10 tokens" in str(error)
        assert "table header" in str(error)

    def test_irreducible_content_preview_is_truncated(self):
        error = IrreducibleContentError("x" * 200, 200, 10)
        assert error.unit == "x" * 200
        assert "..." in str(error)
        assert "x" * 100 not in str(error)

    def test_cancelled(self):
        error = ChunkingCancelledError("doc-1")
        assert error.document_id == "doc-1"
        assert "doc-1" in str(error)

    def test_cancelled_without_document(self):
        assert str(ChunkingCancelledError()) == "Chunking was cancelled"

    def test_embedding(self):
        error = EmbeddingError(expected=3, received=2)
        assert error.expected == 3
        assert error.received == 2
        assert "2 vectors for 3 inputs" in str(error)


class TestHierarchy:
    @pytest.mark.parametrize("error", [
        DocumentRequiredError(),
        IrreducibleContentError("unit", 5, 4),
        ChunkingCancelledError("doc"),
        EmbeddingError(1, 0),
    ])
    def test_all_derive_from_chunking_error(self, error):
        assert isinstance(error, ChunkingError)

    def test_catch_by_base_class(self):
        with pytest.raises(ChunkingError):
            raise IrreducibleContentError("unit", 5, 4)
