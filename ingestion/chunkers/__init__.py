"""Chunker implementations; all share the process(document) entry point."""

from .base import (
    ChunkAccumulator,
    HeaderStack,
    IngestionChunker,
    StructuralChunker,
    chunk_document,
)
from .header import HeaderChunker
from .markdown import MarkdownChunker
from .section import SectionChunker
from .semantic import SemanticSimilarityChunker, cosine_similarity
from .token import DocumentTokenChunker

__all__ = [
    "ChunkAccumulator",
    "HeaderStack",
    "IngestionChunker",
    "StructuralChunker",
    "chunk_document",
    "HeaderChunker",
    "MarkdownChunker",
    "SectionChunker",
    "SemanticSimilarityChunker",
    "cosine_similarity",
    "DocumentTokenChunker",
]
