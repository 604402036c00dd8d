"""
Section Chunker - one chunk run per document section.

Each section's directly-owned elements are joined with newlines. Headers
that open a section (before any of its content) become its context, layered
over the parent section's context; later headers stay in the content.
A nested section closes the parent's pending chunk, is chunked on its own,
and the parent then continues with a fresh chunk.
"""

from typing import Iterator

from ..models import Header, IngestionChunk, IngestionDocument, Paragraph, Section, Table
from .base import Checkpoint, ChunkAccumulator, HeaderStack, StructuralChunker


class SectionChunker(StructuralChunker):
    """Chunks a document section by section under a token budget."""

    context_separator = " "

    def _iter_chunks(
        self,
        document: IngestionDocument,
        checkpoint: Checkpoint,
    ) -> Iterator[IngestionChunk]:
        for section in document.sections:
            yield from self._chunk_section(section, HeaderStack(), document, checkpoint)

    def _chunk_section(
        self,
        section: Section,
        parent_stack: HeaderStack,
        document: IngestionDocument,
        checkpoint: Checkpoint,
    ) -> Iterator[IngestionChunk]:
        stack = parent_stack.copy()
        accumulator = ChunkAccumulator(
            self.options, document, stack.join(self.context_separator)
        )
        leading = True

        for element in section.elements:
            checkpoint()
            match element:
                case Header() if leading:
                    stack.push(element)
                    accumulator.context = stack.join(self.context_separator)
                case Header():
                    yield from accumulator.add_text(element.text)
                case Paragraph():
                    leading = False
                    yield from accumulator.add_text(element.text)
                case Table():
                    leading = False
                    yield from accumulator.add_table(element)
                case Section():
                    leading = False
                    yield from accumulator.finish()
                    yield from self._chunk_section(element, stack, document, checkpoint)

        yield from accumulator.finish()
