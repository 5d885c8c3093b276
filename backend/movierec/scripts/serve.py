#!/usr/bin/env python3
"""Script for serving the movie recommendation API."""

import argparse
import os
import sys
from pathlib import Path

import structlog
import uvicorn

from movierec.service.config import config
from movierec.service.log import configure_logging

logger = structlog.get_logger(__name__)

def validate_environment(corpus_path: str) -> bool:
    """Check the corpus and API key before starting the service."""
    logger.info("Validating environment")
    ok = True

    if not Path(corpus_path).exists():
        logger.warning("Corpus not found, run movierec.scripts.seed first", corpus=corpus_path)
        ok = False

    if not config.TMDB_API_KEY:
        logger.warning("MOVIEREC_TMDB_API_KEY is not set, TMDB routes will fail")

    logger.info("Environment validation completed", ok=ok)
    return ok

def start_server(host: str = None, port: int = None, reload: bool = False, workers: int = 1):
    """Start the FastAPI server."""
    host = host or config.API_HOST
    port = port or config.API_PORT

    logger.info("Starting recommendation service",
               host=host,
               port=port,
               reload=reload,
               workers=workers)

    try:
        uvicorn.run(
            "movierec.service.api:app",
            host=host,
            port=port,
            reload=reload,
            workers=workers if not reload else 1,
            log_level=config.LOG_LEVEL.lower(),
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error("Server failed to start", error=str(e))
        sys.exit(1)

def main():
    """Main function."""
    parser = argparse.ArgumentParser(description="Start the movie recommendation API")

    parser.add_argument("--host", type=str, default=config.API_HOST,
                        help=f"Host to bind to (default: {config.API_HOST})")
    parser.add_argument("--port", type=int, default=config.API_PORT,
                        help=f"Port to bind to (default: {config.API_PORT})")
    parser.add_argument("--reload", action="store_true",
                        help="Enable auto-reload for development")
    parser.add_argument("--workers", type=int, default=1,
                        help="Number of worker processes (default: 1)")
    parser.add_argument("--corpus", type=str, default=config.CORPUS_PATH,
                        help=f"Corpus Parquet file (default: {config.CORPUS_PATH})")
    parser.add_argument("--validate", action="store_true",
                        help="Validate environment and exit")

    args = parser.parse_args()
    configure_logging()

    # Worker processes read the corpus location from the environment
    os.environ["MOVIEREC_CORPUS_PATH"] = args.corpus

    if args.validate:
        sys.exit(0 if validate_environment(args.corpus) else 1)

    validate_environment(args.corpus)
    start_server(host=args.host, port=args.port, reload=args.reload, workers=args.workers)

if __name__ == "__main__":
    main()
