#!/usr/bin/env python3
"""Seed the local movie corpus from a TMDB ``movies_metadata.csv``.

Usage:
    python -m movierec.scripts.seed --csv dataset/movies_metadata.csv
"""

import argparse
import sys
import time

import structlog

from movierec.data.loaders import MovieCSVLoader
from movierec.data.store import InMemoryCorpusStore
from movierec.service.config import config
from movierec.service.log import configure_logging

logger = structlog.get_logger(__name__)

def seed(csv_path: str, out_path: str, max_movies: int = None) -> InMemoryCorpusStore:
    """Load the CSV, index it and save the corpus."""
    start_time = time.time()

    documents = MovieCSVLoader(max_movies=max_movies).load(csv_path)
    logger.info("Parsed movies, inserting into corpus", documents=len(documents))

    store = InMemoryCorpusStore()
    inserted = store.insert_many(documents)
    store.save(out_path)

    logger.info("Seeding completed",
                inserted=inserted,
                duplicates=len(documents) - inserted,
                path=out_path,
                elapsed_s=round(time.time() - start_time, 2))
    return store

def main():
    """Main function."""
    parser = argparse.ArgumentParser(description="Seed the movie corpus from a metadata CSV")

    parser.add_argument(
        "--csv",
        type=str,
        default=config.SEED_CSV,
        help=f"Input CSV (default: {config.SEED_CSV})"
    )

    parser.add_argument(
        "--out",
        type=str,
        default=config.CORPUS_PATH,
        help=f"Output Parquet corpus (default: {config.CORPUS_PATH})"
    )

    parser.add_argument(
        "--max-movies",
        type=int,
        default=config.SEED_MAX_MOVIES,
        help=f"Maximum number of movies to load (default: {config.SEED_MAX_MOVIES})"
    )

    args = parser.parse_args()
    configure_logging()

    try:
        seed(args.csv, args.out, args.max_movies)
    except Exception as e:
        logger.error("Seeding error", error=str(e))
        sys.exit(1)

if __name__ == "__main__":
    main()
