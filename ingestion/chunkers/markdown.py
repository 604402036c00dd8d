"""
Markdown Chunker - header chunking for markdown-style headers.

Header texts carry their markdown markers ("## Setup") and the context is
joined with ";" ("# Intro;## Setup"). Headers deeper than
max_header_level_to_split_on do not start a new chunk: their text is kept
as a content line under the nearest splitting ancestor.
"""

from typing import Optional

from ..config import ChunkerOptions
from ..models import Header
from .header import HeaderChunker


class MarkdownChunker(HeaderChunker):
    """
    Header chunker over markdown headers with a configurable split depth.

    Options are optional here: without them content is never split.
    """

    context_separator = ";"
    requires_options = False

    def __init__(
        self,
        max_header_level_to_split_on: Optional[int] = None,
        options: Optional[ChunkerOptions] = None,
    ):
        if max_header_level_to_split_on is not None and max_header_level_to_split_on < 1:
            raise ValueError(
                f"max_header_level_to_split_on must be at least 1, "
                f"got {max_header_level_to_split_on}"
            )
        super().__init__(options)
        self.max_header_level_to_split_on = max_header_level_to_split_on

    def _splits_on(self, header: Header) -> bool:
        if self.max_header_level_to_split_on is None:
            return True
        return header.level <= self.max_header_level_to_split_on
