import argparse
import asyncio
import logging
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv(ROOT / ".env")

from ingestion.app import create_app
from ingestion.config import STRATEGIES, ChunkingServiceConfig
from ingestion.logging_config import setup_logging
from ingestion.service import ChunkingService
import uvicorn


def run_chunk(
    document_path: str,
    strategy: str | None = None,
    max_tokens: int | None = None,
    overlap: int | None = None,
    output_path: str | None = None,
) -> None:
    service = ChunkingService(ChunkingServiceConfig.from_env())
    result = asyncio.run(
        service.chunk_from_file(
            document_path,
            strategy=strategy,
            max_tokens_per_chunk=max_tokens,
            overlap_tokens=overlap,
        )
    )
    print(f"document_id: {result.document_id}")
    print(f"strategy: {result.strategy}")
    print(f"chunks: {result.total_chunks}")
    print(f"avg_tokens: {result.stats.avg_chunk_tokens:.1f}")
    if output_path:
        result.save(output_path)
        print(f"output_path: {output_path}")


def run_server(host: str, port: int) -> None:
    app = create_app()
    uvicorn.run(app, host=host, port=port)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Chunking runner (CLI chunking or API server)."
    )
    parser.add_argument("--serve", action="store_true", help="Run FastAPI server")
    parser.add_argument("--host", default="0.0.0.0", help="Server host")
    parser.add_argument("--port", type=int, default=8002, help="Server port")
    parser.add_argument("--document", help="Path to a document tree JSON file")
    parser.add_argument("--strategy", choices=STRATEGIES, help="Chunking strategy")
    parser.add_argument("--max-tokens", type=int, help="Maximum tokens per chunk")
    parser.add_argument("--overlap", type=int, help="Overlap tokens (token strategy)")
    parser.add_argument("--output", help="Optional output path for chunks JSON")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.serve:
        run_server(args.host, args.port)
        return

    if not args.document:
        parser.error("Provide --document or use --serve to run the API.")
    run_chunk(args.document, args.strategy, args.max_tokens, args.overlap, args.output)


if __name__ == "__main__":
    main()
