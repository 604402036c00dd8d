"""
Document Token Chunker - fixed token windows with overlap.

Ignores the document structure: all leaf text is joined with newlines,
encoded once, and cut into windows of at most max_tokens_per_chunk tokens.
Each window starts overlap_tokens tokens before the previous one ended, so
consecutive windows share up to overlap_tokens tokens. Chunks carry no context.

Windows never cut a character in half. With byte-level tokenizers a
multi-byte character can span several tokens; a window that would end inside
one is shortened, and a window that would start inside one begins at the next
whole character. The overlap can be a little shorter in that case.
"""

from typing import Iterator

from ..exceptions import IrreducibleContentError
from ..models import IngestionChunk, IngestionDocument, element_text
from ..splitting import REPLACEMENT_CHAR
from .base import Checkpoint, StructuralChunker


class DocumentTokenChunker(StructuralChunker):
    """Sliding token-window chunker."""

    def _iter_chunks(
        self,
        document: IngestionDocument,
        checkpoint: Checkpoint,
    ) -> Iterator[IngestionChunk]:
        texts: list[str] = []
        for element in document.enumerate_content():
            checkpoint()
            text = element_text(element).strip()
            if text:
                texts.append(text)

        if not texts:
            return

        tokenizer = self.options.tokenizer
        text = "\n".join(texts)
        tokens = tokenizer.encode(text)
        check_broken = REPLACEMENT_CHAR not in text
        size = self.options.max_tokens_per_chunk
        overlap = self.options.overlap_tokens
        start = 0
        previous_end = 0

        while start < len(tokens):
            checkpoint()
            end = min(start + size, len(tokens))
            window = tokenizer.decode(tokens[start:end])

            # Tokens before previous_end were emitted already, so skipping
            # them to reach a character boundary loses nothing.
            while check_broken and start < previous_end and window.startswith(REPLACEMENT_CHAR):
                start += 1
                end = min(start + size, len(tokens))
                window = tokenizer.decode(tokens[start:end])

            while end - start > 1 and not self._fits(window, size, check_broken):
                end -= 1
                window = tokenizer.decode(tokens[start:end])

            if not self._fits(window, size, check_broken):
                raise IrreducibleContentError(
                    window, tokenizer.count_tokens(window.strip()), size,
                    details="single token window",
                )

            content = window.strip()
            if content:
                yield IngestionChunk(
                    content=content,
                    context=None,
                    document=document,
                    metadata={
                        "token_count": end - start,
                        "start_token": start,
                        "end_token": end,
                    },
                )
            if end >= len(tokens):
                break
            previous_end = end
            start = max(end - overlap, start + 1)

    def _fits(self, window: str, size: int, check_broken: bool) -> bool:
        if check_broken and window.endswith(REPLACEMENT_CHAR):
            return False
        return self.options.tokenizer.count_tokens(window.strip()) <= size
