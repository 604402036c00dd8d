"""
Result models of a chunking run.

Defines:
1. ChunkRecord - a serializable chunk (the document back-reference replaced by its id)
2. ChunkingStats - token statistics over all chunks
3. ChunkingResult - complete output of one run, with save/load

Usage:
    result = await service.chunk(document)
    result.save("chunks.json")
    result = ChunkingResult.load("chunks.json")
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from .models import IngestionChunk


class ChunkRecord(BaseModel):
    """A chunk ready for embedding and storage."""
    chunk_id: str = Field(
        ...,
        description="Unique identifier (format: {document_id}_chunk_{index:04d})",
    )
    document_id: str
    chunk_index: int = Field(..., ge=0)
    content: str = Field(..., min_length=1)
    context: Optional[str] = None
    token_count: Optional[int] = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_chunk(cls, chunk: IngestionChunk, index: int) -> "ChunkRecord":
        document_id = chunk.document.id
        return cls(
            chunk_id=f"{document_id}_chunk_{index:04d}",
            document_id=document_id,
            chunk_index=index,
            content=chunk.content,
            context=chunk.context,
            token_count=chunk.metadata.get("token_count"),
            metadata=chunk.metadata,
        )


class ChunkingStats(BaseModel):
    """Statistics about the chunking process."""
    total_chunks: int = 0
    total_tokens: int = 0
    avg_chunk_tokens: float = 0.0
    min_chunk_tokens: int = 0
    max_chunk_tokens: int = 0

    @classmethod
    def from_records(cls, records: list[ChunkRecord]) -> "ChunkingStats":
        counts = [r.token_count for r in records if r.token_count is not None]
        if not counts:
            return cls(total_chunks=len(records))
        return cls(
            total_chunks=len(records),
            total_tokens=sum(counts),
            avg_chunk_tokens=sum(counts) / len(counts),
            min_chunk_tokens=min(counts),
            max_chunk_tokens=max(counts),
        )


class ChunkingResult(BaseModel):
    """
    Complete result of chunking a document.
    """
    document_id: str
    strategy: str
    max_tokens_per_chunk: Optional[int] = None
    overlap_tokens: Optional[int] = None
    chunks: list[ChunkRecord] = Field(default_factory=list)
    stats: ChunkingStats = Field(default_factory=ChunkingStats)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When chunking was performed",
    )

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)

    def get_chunk_by_id(self, chunk_id: str) -> Optional[ChunkRecord]:
        """Find a chunk by its ID."""
        for chunk in self.chunks:
            if chunk.chunk_id == chunk_id:
                return chunk
        return None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    def save(self, path: str) -> None:
        """Save chunking result to a JSON file."""
        Path(path).write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: str) -> "ChunkingResult":
        """Load chunking result from a JSON file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)
