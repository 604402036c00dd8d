import asyncio
from typing import Optional

from .chunkers import (
    DocumentTokenChunker,
    HeaderChunker,
    IngestionChunker,
    MarkdownChunker,
    SectionChunker,
    SemanticSimilarityChunker,
    chunk_document,
)
from .config import STRATEGIES, ChunkerOptions, ChunkingServiceConfig
from .embeddings import EmbeddingGenerator, OllamaEmbeddingGenerator
from .logging_config import get_logger
from .models import IngestionDocument
from .results import ChunkingResult, ChunkingStats, ChunkRecord
from .tokenizer import TiktokenTokenizer, Tokenizer

logger = get_logger(__name__)


class ChunkingService:
    def __init__(
        self,
        config: ChunkingServiceConfig | None = None,
        tokenizer: Tokenizer | None = None,
        embedding_generator: EmbeddingGenerator | None = None,
    ):
        self.config = config or ChunkingServiceConfig()
        self.tokenizer = tokenizer or TiktokenTokenizer(self.config.encoding_name)
        self._embedding_generator = embedding_generator

    @property
    def embedding_generator(self) -> EmbeddingGenerator:
        if self._embedding_generator is None:
            self._embedding_generator = OllamaEmbeddingGenerator(
                model=self.config.embedding_model,
                base_url=self.config.ollama_base_url,
            )
        return self._embedding_generator

    def build_options(
        self,
        max_tokens_per_chunk: Optional[int] = None,
        overlap_tokens: Optional[int] = None,
    ) -> ChunkerOptions:
        return ChunkerOptions(
            tokenizer=self.tokenizer,
            max_tokens_per_chunk=(
                max_tokens_per_chunk if max_tokens_per_chunk is not None
                else self.config.max_tokens_per_chunk
            ),
            overlap_tokens=overlap_tokens if overlap_tokens is not None else self.config.overlap_tokens,
        )

    def create_chunker(
        self,
        strategy: Optional[str] = None,
        options: Optional[ChunkerOptions] = None,
    ) -> IngestionChunker:
        strategy = strategy or self.config.strategy
        options = options or self.build_options()

        match strategy:
            case "section":
                return SectionChunker(options)
            case "header":
                return HeaderChunker(options)
            case "markdown":
                return MarkdownChunker(self.config.max_header_level_to_split_on, options)
            case "token":
                return DocumentTokenChunker(options)
            case "semantic":
                return SemanticSimilarityChunker(
                    self.embedding_generator,
                    options,
                    similarity_threshold=self.config.similarity_threshold,
                )
            case _:
                raise ValueError(
                    f"Unknown chunking strategy '{strategy}'. "
                    f"Expected one of: {', '.join(STRATEGIES)}"
                )

    async def chunk(
        self,
        document: IngestionDocument,
        strategy: Optional[str] = None,
        max_tokens_per_chunk: Optional[int] = None,
        overlap_tokens: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ChunkingResult:
        strategy = strategy or self.config.strategy
        options = self.build_options(max_tokens_per_chunk, overlap_tokens)
        chunker = self.create_chunker(strategy, options)

        chunks = await chunk_document(chunker, document, cancel_event)
        records = [ChunkRecord.from_chunk(chunk, i) for i, chunk in enumerate(chunks)]
        logger.info(
            "Chunked %s with '%s' strategy: %d chunks",
            document.id, strategy, len(records),
        )
        return ChunkingResult(
            document_id=document.id,
            strategy=strategy,
            max_tokens_per_chunk=options.max_tokens_per_chunk,
            overlap_tokens=options.overlap_tokens,
            chunks=records,
            stats=ChunkingStats.from_records(records),
        )

    async def chunk_from_file(self, document_path: str, **kwargs) -> ChunkingResult:
        """Load a document tree from JSON and chunk it."""
        return await self.chunk(IngestionDocument.load(document_path), **kwargs)
