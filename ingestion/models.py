"""
Data Models for the Document Chunking Engine

Defines:
1. Header, Paragraph, Table, Section - the element variants of a parsed document
2. IngestionDocument - the document tree handed over by a parser
3. IngestionChunk - a single bounded-size piece of text produced by a chunker

Design Principles:
- Pydantic v2 for validation and serialization
- Elements form a tagged union on the `kind` field, so a parsed document can
  be round-tripped through JSON and traversed with an exhaustive match
- Documents are frozen once built; chunkers only read them
- A chunk points back at its document without copying or serializing it

Usage:
    doc = IngestionDocument(id="doc", sections=[
        Section(elements=[
            Header(text="Intro", level=1),
            Paragraph(text="Some text."),
        ])
    ])
    for element in doc.enumerate_content():
        ...
"""

import json
from pathlib import Path
from typing import Annotated, Any, Iterator, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Element(BaseModel):
    model_config = ConfigDict(frozen=True)

    page_number: Optional[int] = Field(
        None,
        description="Source page the element was parsed from, if known",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Parser-supplied metadata, ignored by the chunkers",
    )


class Header(_Element):
    """A heading. Its level drives breadcrumb nesting, not the tree depth."""
    kind: Literal["header"] = "header"
    text: str
    level: int = Field(1, ge=1)


class Paragraph(_Element):
    """Atomic prose; may need sub-splitting when it exceeds the budget."""
    kind: Literal["paragraph"] = "paragraph"
    text: str


class Table(_Element):
    """
    A table in markdown form plus its cell grid.

    The first markdown line is the header row and the second the separator
    row; every later line is one data row. When the table alone exceeds the
    token budget it is split row-wise and each piece repeats those two lines.
    """
    kind: Literal["table"] = "table"
    markdown: str
    cells: list[list[Optional[Paragraph]]] = Field(default_factory=list)

    @classmethod
    def from_cells(cls, cells: list[list[Optional[str]]], **kwargs: Any) -> "Table":
        """Build a table whose markdown is rendered from a grid of cell texts."""
        if not cells:
            raise ValueError("A table needs at least a header row")

        def render(row: list[Optional[str]]) -> str:
            return "| " + " | ".join(cell or "" for cell in row) + " |"

        lines = [render(cells[0]), "| " + " | ".join("---" for _ in cells[0]) + " |"]
        lines.extend(render(row) for row in cells[1:])
        grid = [
            [Paragraph(text=cell) if cell is not None else None for cell in row]
            for row in cells
        ]
        return cls(markdown="\n".join(lines), cells=grid, **kwargs)

    @property
    def lines(self) -> list[str]:
        return [line for line in self.markdown.strip().splitlines() if line.strip()]

    @property
    def prefix_lines(self) -> list[str]:
        """Header line and separator line."""
        return self.lines[:2]

    @property
    def rows(self) -> list[str]:
        return self.lines[2:]


class Section(_Element):
    """Recursive container; a section may nest other sections."""
    kind: Literal["section"] = "section"
    elements: list["Element"] = Field(default_factory=list)


Element = Annotated[
    Union[Header, Paragraph, Table, Section],
    Field(discriminator="kind"),
]

Section.model_rebuild()


def element_text(element: Union[Header, Paragraph, Table]) -> str:
    """Leaf text of an element: header/paragraph text or table markdown."""
    match element:
        case Header() | Paragraph():
            return element.text
        case Table():
            return element.markdown.strip()
        case _:
            raise TypeError(f"Element has no leaf text: {type(element).__name__}")


class IngestionDocument(BaseModel):
    """
    A parsed document: an ordered list of root-level sections.

    Built once by a parser and read-only afterwards; it can be shared by
    several chunking runs at the same time.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique identifier of the document")
    sections: list[Section] = Field(default_factory=list)

    def enumerate_content(self) -> Iterator[Union[Header, Paragraph, Table]]:
        """Yield every non-section element in document (pre-order) order."""
        stack: list[Iterator[Element]] = [iter(self.sections)]
        while stack:
            element = next(stack[-1], None)
            if element is None:
                stack.pop()
                continue
            if isinstance(element, Section):
                stack.append(iter(element.elements))
            else:
                yield element

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.model_dump(mode="json"), ensure_ascii=False, indent=indent)

    def save(self, path: str) -> None:
        """Save the document tree to a JSON file."""
        Path(path).write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: str) -> "IngestionDocument":
        """Load a document tree from a JSON file."""
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))


class IngestionChunk(BaseModel):
    """
    A single text chunk, ready for embedding and indexing.
    """
    content: str = Field(
        ...,
        description="Chunk text; several elements are joined by newlines",
    )
    context: Optional[str] = Field(
        None,
        description="Breadcrumb of the enclosing headers, None at the document root",
    )
    document: IngestionDocument = Field(
        ...,
        description="The document this chunk was cut from",
        exclude=True,
        repr=False,
    )
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        data["document_id"] = self.document.id
        return data
