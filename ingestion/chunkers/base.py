"""
Chunker base class and the accumulator shared by the structural chunkers.

Every chunker exposes the same entry point:

    async for chunk in chunker.process(document):
        ...

process() returns a lazy async iterator that can be consumed once. Each call
starts from fresh state, so one chunker instance can serve several runs,
also concurrently over the same (read-only) document.

The accumulator implements the state machine of the structural chunkers:
content is collected until the next unit would overflow the budget, then the
collected content is flushed as a chunk. A unit that is too large on its own
is split first and its fragments are fed through the same path.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import AsyncIterator, Callable, Iterator, Optional

from ..config import ChunkerOptions
from ..exceptions import (
    ChunkingCancelledError,
    DocumentRequiredError,
    IrreducibleContentError,
)
from ..logging_config import get_logger
from ..models import Header, IngestionChunk, IngestionDocument, Table
from ..splitting import pack_table_rows, split_oversized_text

logger = get_logger(__name__)

Checkpoint = Callable[[], None]


class HeaderStack:
    """Active headers ordered by level; at most one entry per level."""

    def __init__(self, headers: Optional[list[Header]] = None):
        self._headers: list[Header] = list(headers or [])

    def push(self, header: Header) -> None:
        while self._headers and self._headers[-1].level >= header.level:
            self._headers.pop()
        self._headers.append(header)

    def copy(self) -> "HeaderStack":
        return HeaderStack(self._headers)

    @property
    def levels(self) -> list[int]:
        return [header.level for header in self._headers]

    def join(self, separator: str) -> Optional[str]:
        if not self._headers:
            return None
        return separator.join(header.text.strip() for header in self._headers)

    def __len__(self) -> int:
        return len(self._headers)


class ChunkAccumulator:
    """
    Collects element text into chunks under a token budget.

    Without options there is no budget and content is never split.
    The context's own token cost is charged against the budget.

    A table that does not fit next to the running content is normally moved
    to a fresh chunk when it fits there on its own. With fill_tables it is
    split row-wise into the leftover space instead.
    """

    def __init__(
        self,
        options: Optional[ChunkerOptions],
        document: IngestionDocument,
        context: Optional[str] = None,
        fill_tables: bool = False,
    ):
        self.options = options
        self.document = document
        self.context = context
        self.fill_tables = fill_tables
        self._parts: list[str] = []

    def _available(self) -> Optional[int]:
        """Tokens left for content once the context is paid for."""
        if self.options is None:
            return None
        context_tokens = self.options.count_tokens(self.context or "")
        available = self.options.max_tokens_per_chunk - context_tokens
        if available < 1:
            raise IrreducibleContentError(
                self.context or "",
                context_tokens,
                self.options.max_tokens_per_chunk,
                details="header context leaves no room for content",
            )
        return available

    def _fits(self, text: str, budget: int) -> bool:
        return self.options.count_tokens(text) <= budget

    def _joined_with(self, text: str) -> str:
        return "\n".join([*self._parts, text])

    def flush(self) -> Optional[IngestionChunk]:
        if not self._parts:
            return None
        content = "\n".join(self._parts)
        self._parts = []
        token_count = self.options.count_tokens(content) if self.options else None
        logger.debug(
            "Flushing chunk for %s (%s tokens, context=%r)",
            self.document.id, token_count, self.context,
        )
        metadata = {"token_count": token_count} if token_count is not None else {}
        return IngestionChunk(
            content=content,
            context=self.context,
            document=self.document,
            metadata=metadata,
        )

    def finish(self) -> Iterator[IngestionChunk]:
        """Flush whatever has been collected."""
        chunk = self.flush()
        if chunk is not None:
            yield chunk

    def add_text(self, text: str) -> Iterator[IngestionChunk]:
        """Add paragraph-like text, yielding any chunks that had to be flushed."""
        text = text.strip()
        if not text:
            return

        budget = self._available()
        if budget is None or self._fits(self._joined_with(text), budget):
            self._parts.append(text)
            return

        yield from self.finish()

        if self._fits(text, budget):
            self._parts.append(text)
            return

        fragments = split_oversized_text(text, budget, self.options.tokenizer)
        for fragment in fragments[:-1]:
            self._parts.append(fragment)
            yield from self.finish()
        self._parts.append(fragments[-1])

    def add_table(self, table: Table) -> Iterator[IngestionChunk]:
        """
        Add a table, splitting it row-wise when it does not fit.

        The first fragment fills the space left in the running chunk; the last
        fragment stays open so that following content can join it.
        """
        markdown = table.markdown.strip()
        if not markdown:
            return

        budget = self._available()
        if budget is None or self._fits(self._joined_with(markdown), budget):
            self._parts.append(markdown)
            return

        rows = table.rows
        if self._fits(markdown, budget) and not (self.fill_tables and rows):
            yield from self.finish()
            self._parts.append(markdown)
            return

        prefix = "\n".join(table.prefix_lines)
        if not rows:
            raise IrreducibleContentError(
                prefix, self.options.count_tokens(prefix), budget,
                details="table header and separator",
            )

        if self._parts:
            fragment, rows = pack_table_rows(
                prefix, rows, lambda candidate: self._fits(self._joined_with(candidate), budget)
            )
            if fragment:
                self._parts.append(fragment)
            yield from self.finish()

        while rows:
            fragment, rows = pack_table_rows(
                prefix, rows, lambda candidate: self._fits(candidate, budget)
            )
            if not fragment:
                unit = f"{prefix}\n{rows[0]}"
                raise IrreducibleContentError(
                    unit, self.options.count_tokens(unit), budget,
                    details="table header, separator and first row",
                )
            self._parts.append(fragment)
            if rows:
                yield from self.finish()


class IngestionChunker(ABC):
    """Base class of all chunkers."""

    requires_options = True

    def __init__(self, options: Optional[ChunkerOptions] = None):
        if options is None and self.requires_options:
            raise ValueError(f"{type(self).__name__} requires ChunkerOptions")
        self.options = options

    def process(
        self,
        document: IngestionDocument,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AsyncIterator[IngestionChunk]:
        """
        Produce the chunks of a document as a lazy, single-use async iterator.

        Args:
            document: The document to chunk.
            cancel_event: Optional event; once set, the run stops at the next
                element with ChunkingCancelledError.

        Raises:
            DocumentRequiredError: Immediately, if document is None.
        """
        if document is None:
            raise DocumentRequiredError()
        return self._run(document, cancel_event)

    async def _run(
        self,
        document: IngestionDocument,
        cancel_event: Optional[asyncio.Event],
    ) -> AsyncIterator[IngestionChunk]:
        produced = 0
        async for chunk in self._process(document, cancel_event):
            chunk.metadata["chunk_index"] = produced
            produced += 1
            yield chunk
        logger.info(
            "%s produced %d chunks for document %s",
            type(self).__name__, produced, document.id,
        )

    @abstractmethod
    def _process(
        self,
        document: IngestionDocument,
        cancel_event: Optional[asyncio.Event],
    ) -> AsyncIterator[IngestionChunk]:
        """Yield chunks in document order."""


class StructuralChunker(IngestionChunker):
    """Chunker whose traversal needs no awaiting; runs a plain generator."""

    async def _process(
        self,
        document: IngestionDocument,
        cancel_event: Optional[asyncio.Event],
    ) -> AsyncIterator[IngestionChunk]:
        def checkpoint() -> None:
            raise_if_cancelled(document, cancel_event)

        for chunk in self._iter_chunks(document, checkpoint):
            yield chunk

    @abstractmethod
    def _iter_chunks(
        self,
        document: IngestionDocument,
        checkpoint: Checkpoint,
    ) -> Iterator[IngestionChunk]:
        """Yield chunks in document order, calling checkpoint between elements."""


def raise_if_cancelled(
    document: IngestionDocument,
    cancel_event: Optional[asyncio.Event],
) -> None:
    if cancel_event is not None and cancel_event.is_set():
        logger.info("Chunking of document %s cancelled", document.id)
        raise ChunkingCancelledError(document.id)


async def chunk_document(
    chunker: IngestionChunker,
    document: IngestionDocument,
    cancel_event: Optional[asyncio.Event] = None,
) -> list[IngestionChunk]:
    """Run a chunker to completion; nothing is returned if the run fails."""
    return [chunk async for chunk in chunker.process(document, cancel_event)]
