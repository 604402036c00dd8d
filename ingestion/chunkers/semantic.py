"""
Semantic Similarity Chunker - groups content by topic before packing.

Algorithm:
1. Collect candidates in document order. Paragraphs and tables that exceed
   the budget on their own are pre-split into budget-sized pieces.
2. Embed all non-header candidates with one batched generator call.
3. Walk the candidates: a header closes the current group and opens a new
   one; a candidate whose cosine similarity to the most recently merged
   candidate drops below the threshold also starts a new group.
4. Pack every group under the token budget. Table fragments fill the space
   left in a running chunk.

Headers are kept as the first content line of their group. Chunks carry no
context.
"""

import asyncio
from dataclasses import dataclass
from typing import AsyncIterator, Iterator, Optional, Union

import numpy as np

from ..config import ChunkerOptions
from ..embeddings import EmbeddingGenerator
from ..exceptions import EmbeddingError
from ..logging_config import get_logger
from ..models import Header, IngestionChunk, IngestionDocument, Paragraph, Table
from ..splitting import split_oversized_text, split_table
from .base import Checkpoint, ChunkAccumulator, IngestionChunker, raise_if_cancelled

logger = get_logger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.7


@dataclass
class _Candidate:
    element: Union[Header, Paragraph, Table]

    @property
    def is_boundary(self) -> bool:
        return isinstance(self.element, Header)

    @property
    def text(self) -> str:
        if isinstance(self.element, Table):
            return self.element.markdown.strip()
        return self.element.text.strip()


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine similarity in [-1, 1]; 0.0 when either vector has zero length."""
    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


class SemanticSimilarityChunker(IngestionChunker):
    """Chunks a document into topic groups using embedding similarity."""

    def __init__(
        self,
        embedding_generator: EmbeddingGenerator,
        options: Optional[ChunkerOptions] = None,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ):
        if embedding_generator is None:
            raise ValueError("embedding_generator is required")
        if not -1.0 <= similarity_threshold <= 1.0:
            raise ValueError(
                f"similarity_threshold must be within [-1, 1], got {similarity_threshold}"
            )
        super().__init__(options)
        self.embedding_generator = embedding_generator
        self.similarity_threshold = similarity_threshold

    def _candidates(
        self,
        document: IngestionDocument,
        checkpoint: Checkpoint,
    ) -> Iterator[_Candidate]:
        budget = self.options.max_tokens_per_chunk
        tokenizer = self.options.tokenizer

        for element in document.enumerate_content():
            checkpoint()
            match element:
                case Header():
                    yield _Candidate(element)
                case Paragraph():
                    for piece in split_oversized_text(element.text, budget, tokenizer):
                        yield _Candidate(Paragraph(text=piece))
                case Table():
                    markdown = element.markdown.strip()
                    if not markdown:
                        continue
                    if self.options.count_tokens(markdown) <= budget:
                        yield _Candidate(element)
                        continue
                    for fragment in split_table(element, budget, tokenizer):
                        yield _Candidate(Table(markdown=fragment))

    def _group(
        self,
        candidates: list[_Candidate],
        vectors: list[Optional[np.ndarray]],
    ) -> list[list[_Candidate]]:
        groups: list[list[_Candidate]] = []
        current: list[_Candidate] = []
        last_vector: Optional[np.ndarray] = None

        for candidate, vector in zip(candidates, vectors):
            if candidate.is_boundary:
                if current:
                    groups.append(current)
                current = [candidate]
                last_vector = None
                continue

            if (
                last_vector is not None
                and cosine_similarity(last_vector, vector) < self.similarity_threshold
            ):
                groups.append(current)
                current = []

            current.append(candidate)
            last_vector = vector

        if current:
            groups.append(current)
        return groups

    async def _embed(self, candidates: list[_Candidate]) -> list[Optional[np.ndarray]]:
        """Embed non-header candidates in one batch; headers get no vector."""
        texts = [c.text for c in candidates if not c.is_boundary]
        if not texts:
            return [None] * len(candidates)

        embeddings = await self.embedding_generator.generate(texts)
        if len(embeddings) != len(texts):
            raise EmbeddingError(len(texts), len(embeddings))

        vectors = iter(np.asarray(e, dtype=float) for e in embeddings)
        return [None if c.is_boundary else next(vectors) for c in candidates]

    async def _process(
        self,
        document: IngestionDocument,
        cancel_event: Optional[asyncio.Event],
    ) -> AsyncIterator[IngestionChunk]:
        def checkpoint() -> None:
            raise_if_cancelled(document, cancel_event)

        candidates = [c for c in self._candidates(document, checkpoint) if c.text]
        if not candidates:
            return

        checkpoint()
        vectors = await self._embed(candidates)
        checkpoint()

        groups = self._group(candidates, vectors)
        logger.debug(
            "Document %s: %d candidates in %d topic groups",
            document.id, len(candidates), len(groups),
        )

        for group in groups:
            accumulator = ChunkAccumulator(self.options, document, fill_tables=True)
            for candidate in group:
                checkpoint()
                if isinstance(candidate.element, Table):
                    chunks = accumulator.add_table(candidate.element)
                else:
                    chunks = accumulator.add_text(candidate.text)
                for chunk in chunks:
                    yield chunk
            for chunk in accumulator.finish():
                yield chunk
