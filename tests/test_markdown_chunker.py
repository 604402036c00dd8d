"""
Tests for MarkdownChunker.
"""

import pytest

from ingestion import (
    Header,
    IngestionDocument,
    MarkdownChunker,
    Paragraph,
    Section,
    chunk_document,
)

CONTENT_1 = "This is the content under header 1."
CONTENT_2 = "This is the content under header 2."
CONTENT_3 = "This is the content under header 3."
CONTENT_4 = "This is the content under header 4."


def _doc(*elements, doc_id: str = "doc") -> IngestionDocument:
    return IngestionDocument(id=doc_id, sections=[Section(elements=list(elements))])


def _complex_doc() -> IngestionDocument:
    return _doc(
        Header(text="# Header 1", level=1),
        Paragraph(text=CONTENT_1),
        Header(text="## Header 2", level=2),
        Paragraph(text=CONTENT_2),
        Header(text="### Header 3", level=3),
        Paragraph(text=CONTENT_3),
        Header(text="## Header 4", level=2),
        Paragraph(text=CONTENT_4),
    )


def _pairs(chunks):
    return [(c.context, c.content) for c in chunks]


class TestBasicDocuments:
    @pytest.mark.asyncio
    async def test_no_header(self):
        doc = _doc(Paragraph(text="This is a document without headers."))
        chunks = await chunk_document(MarkdownChunker(), doc)

        assert _pairs(chunks) == [(None, "This is a document without headers.")]

    @pytest.mark.asyncio
    async def test_single_header(self):
        doc = _doc(Header(text="# Header 1", level=1), Paragraph(text=CONTENT_1))
        chunks = await chunk_document(MarkdownChunker(), doc)

        assert _pairs(chunks) == [("# Header 1", CONTENT_1)]

    @pytest.mark.asyncio
    async def test_single_header_two_paragraphs(self):
        doc = _doc(
            Header(text="# Header 1", level=1),
            Paragraph(text="This is the first paragraph."),
            Paragraph(text="This is the second paragraph."),
        )
        chunks = await chunk_document(MarkdownChunker(), doc)

        assert _pairs(chunks) == [
            ("# Header 1", "This is the first paragraph.\nThis is the second paragraph."),
        ]

    @pytest.mark.asyncio
    async def test_nested_header(self):
        doc = _doc(
            Header(text="# Header 1", level=1),
            Paragraph(text=CONTENT_1),
            Header(text="## Header 2", level=2),
            Paragraph(text=CONTENT_2),
        )
        chunks = await chunk_document(MarkdownChunker(), doc)

        assert _pairs(chunks) == [
            ("# Header 1", CONTENT_1),
            ("# Header 1;## Header 2", CONTENT_2),
        ]

    @pytest.mark.asyncio
    async def test_two_top_level_headers(self):
        doc = _doc(
            Header(text="# Header 1", level=1),
            Paragraph(text=CONTENT_1),
            Header(text="# Header 2", level=1),
            Paragraph(text=CONTENT_2),
        )
        chunks = await chunk_document(MarkdownChunker(), doc)

        assert _pairs(chunks) == [
            ("# Header 1", CONTENT_1),
            ("# Header 2", CONTENT_2),
        ]


class TestSplitLevel:
    @pytest.mark.asyncio
    async def test_complex_document(self):
        chunks = await chunk_document(MarkdownChunker(), _complex_doc())

        assert _pairs(chunks) == [
            ("# Header 1", CONTENT_1),
            ("# Header 1;## Header 2", CONTENT_2),
            ("# Header 1;## Header 2;### Header 3", CONTENT_3),
            ("# Header 1;## Header 4", CONTENT_4),
        ]

    @pytest.mark.asyncio
    async def test_deeper_headers_fold_into_content(self):
        chunks = await chunk_document(MarkdownChunker(2), _complex_doc())

        assert _pairs(chunks) == [
            ("# Header 1", CONTENT_1),
            ("# Header 1;## Header 2", CONTENT_2 + "\n### Header 3\n" + CONTENT_3),
            ("# Header 1;## Header 4", CONTENT_4),
        ]

    @pytest.mark.asyncio
    async def test_split_on_top_level_only(self):
        chunks = await chunk_document(MarkdownChunker(1), _complex_doc())

        assert len(chunks) == 1
        assert chunks[0].context == "# Header 1"
        assert chunks[0].content.split("\n")[:2] == [CONTENT_1, "## Header 2"]

    def test_invalid_split_level(self):
        with pytest.raises(ValueError, match="max_header_level_to_split_on"):
            MarkdownChunker(0)


class TestWithOptions:
    @pytest.mark.asyncio
    async def test_budget_is_applied(self, make_options, tokenizer):
        doc = _doc(
            Header(text="# Title", level=1),
            Paragraph(text="one two three four"),
            Paragraph(text="five six seven eight"),
        )
        chunks = await chunk_document(MarkdownChunker(options=make_options(7)), doc)

        assert _pairs(chunks) == [
            ("# Title", "one two three four"),
            ("# Title", "five six seven eight"),
        ]
        for chunk in chunks:
            assert tokenizer.count_tokens(chunk.content) + tokenizer.count_tokens(chunk.context) <= 7

    @pytest.mark.asyncio
    async def test_without_options_nothing_is_split(self):
        long_text = " ".join(["word"] * 5000)
        chunks = await chunk_document(MarkdownChunker(), _doc(Paragraph(text=long_text)))

        assert len(chunks) == 1
        assert chunks[0].content == long_text
        assert "token_count" not in chunks[0].metadata
