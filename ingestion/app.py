from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .config import ChunkingServiceConfig
from .exceptions import ChunkingError, IrreducibleContentError
from .models import IngestionDocument
from .results import ChunkingResult
from .service import ChunkingService


class ChunkRequest(BaseModel):
    document: IngestionDocument
    strategy: Optional[str] = Field(None, description="section, header, markdown, token or semantic")
    max_tokens_per_chunk: Optional[int] = None
    overlap_tokens: Optional[int] = None


def create_app(service: ChunkingService | None = None) -> FastAPI:
    service = service or ChunkingService(ChunkingServiceConfig.from_env())
    app = FastAPI(
        title="Chunking Service",
        version="1.0.0",
        description="Structure-aware document chunking service.",
    )

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "strategy": service.config.strategy}

    @app.post("/chunk", response_model=ChunkingResult)
    async def chunk(request: ChunkRequest) -> ChunkingResult:
        try:
            return await service.chunk(
                request.document,
                strategy=request.strategy,
                max_tokens_per_chunk=request.max_tokens_per_chunk,
                overlap_tokens=request.overlap_tokens,
            )
        except IrreducibleContentError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except ChunkingError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    return app
