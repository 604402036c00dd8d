"""
Header Chunker - one chunk run per header.

Walks the document in order, flushing whenever a header arrives and content
is pending. The active headers form a stack keyed by level, and the stack at
flush time becomes the chunk's context:

    # Intro            context: "Intro"
    ## Setup           context: "Intro Setup"
    ## Usage           context: "Intro Usage"   (Setup popped)

Header text lives in the context, not in the content.
"""

from typing import Iterator

from ..models import Header, IngestionChunk, IngestionDocument, Paragraph, Table
from .base import Checkpoint, ChunkAccumulator, HeaderStack, StructuralChunker


class HeaderChunker(StructuralChunker):
    """Chunks a document by its header outline under a token budget."""

    context_separator = " "

    def _splits_on(self, header: Header) -> bool:
        """Whether the header starts a new chunk (and enters the context)."""
        return True

    def _iter_chunks(
        self,
        document: IngestionDocument,
        checkpoint: Checkpoint,
    ) -> Iterator[IngestionChunk]:
        stack = HeaderStack()
        accumulator = ChunkAccumulator(self.options, document)

        for element in document.enumerate_content():
            checkpoint()
            match element:
                case Header() if self._splits_on(element):
                    yield from accumulator.finish()
                    stack.push(element)
                    accumulator.context = stack.join(self.context_separator)
                case Header():
                    yield from accumulator.add_text(element.text)
                case Paragraph():
                    yield from accumulator.add_text(element.text)
                case Table():
                    yield from accumulator.add_table(element)

        yield from accumulator.finish()
