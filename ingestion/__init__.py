"""
Ingestion - structure-aware document chunking for retrieval pipelines

Turns a parsed document tree (sections, headers, paragraphs, tables) into an
ordered sequence of bounded-size text chunks for embedding and indexing.
Every chunk stays within a token budget; header breadcrumbs travel with the
chunks as context.

Quick Start:
    from ingestion import (
        ChunkerOptions, HeaderChunker, IngestionDocument, TiktokenTokenizer,
        chunk_document,
    )

    document = IngestionDocument.load("document.json")
    options = ChunkerOptions(tokenizer=TiktokenTokenizer(), max_tokens_per_chunk=512)
    chunks = await chunk_document(HeaderChunker(options), document)
"""

__version__ = "1.0.0"

from .chunkers import (
    DocumentTokenChunker,
    HeaderChunker,
    IngestionChunker,
    MarkdownChunker,
    SectionChunker,
    SemanticSimilarityChunker,
    chunk_document,
)
from .config import ChunkerOptions, ChunkingServiceConfig
from .embeddings import EmbeddingGenerator, OllamaEmbeddingGenerator
from .exceptions import (
    ChunkingCancelledError,
    ChunkingError,
    DocumentRequiredError,
    EmbeddingError,
    IrreducibleContentError,
)
from .models import (
    Header,
    IngestionChunk,
    IngestionDocument,
    Paragraph,
    Section,
    Table,
)
from .results import ChunkingResult, ChunkingStats, ChunkRecord
from .service import ChunkingService
from .splitting import split_oversized_text, split_table
from .tokenizer import TiktokenTokenizer, Tokenizer, count_tokens

__all__ = [
    "__version__",
    # Chunkers
    "IngestionChunker",
    "SectionChunker",
    "HeaderChunker",
    "MarkdownChunker",
    "DocumentTokenChunker",
    "SemanticSimilarityChunker",
    "chunk_document",
    # Configuration
    "ChunkerOptions",
    "ChunkingServiceConfig",
    "ChunkingService",
    # Collaborators
    "Tokenizer",
    "TiktokenTokenizer",
    "count_tokens",
    "EmbeddingGenerator",
    "OllamaEmbeddingGenerator",
    # Models
    "IngestionDocument",
    "Section",
    "Header",
    "Paragraph",
    "Table",
    "IngestionChunk",
    "ChunkRecord",
    "ChunkingResult",
    "ChunkingStats",
    # Primitives
    "split_oversized_text",
    "split_table",
    # Errors
    "ChunkingError",
    "DocumentRequiredError",
    "IrreducibleContentError",
    "ChunkingCancelledError",
    "EmbeddingError",
]
