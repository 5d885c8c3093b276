"""Loading TMDB movie metadata CSVs into corpus documents."""

import ast
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import structlog

from .documents import Document, build_tags
from ..service.config import config

logger = structlog.get_logger(__name__)

class MovieCSVLoader:
    """Turns rows of a TMDB ``movies_metadata.csv`` into documents."""

    def __init__(self, max_movies: int = None):
        self.max_movies = max_movies if max_movies is not None else config.SEED_MAX_MOVIES

    def load(self, path: str) -> List[Document]:
        """Load and convert every usable row, up to ``max_movies``."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Movies file not found: {path}")

        logger.info("Loading movies CSV", path=str(path))
        try:
            df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8")
        except UnicodeDecodeError:
            df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="latin-1")

        documents = self.from_dataframe(df)
        logger.info("Movies parsed", rows=len(df), documents=len(documents))
        return documents

    def from_dataframe(self, df: pd.DataFrame) -> List[Document]:
        """Convert a raw metadata frame, skipping rows without an id or title."""
        documents = []
        skipped = 0
        for row in df.to_dict(orient="records"):
            if len(documents) >= self.max_movies:
                break
            doc = self.parse_row(row)
            if doc is None:
                skipped += 1
                continue
            documents.append(doc)

        if skipped:
            logger.debug("Rows skipped", skipped=skipped)
        return documents

    def parse_row(self, row: Dict[str, Any]) -> Optional[Document]:
        """Build one document, or None when the row is unusable."""
        tmdb_id = self.parse_int(row.get("id"))
        title = _text(row.get("title")) or _text(row.get("original_title"))
        if tmdb_id is None or not title:
            return None

        overview = _text(row.get("overview"))
        genres = self.parse_genres(row.get("genres"))
        tagline = _text(row.get("tagline"))

        return Document(
            id=tmdb_id,
            title=title,
            overview=overview,
            genres=genres,
            poster_path=_text(row.get("poster_path")) or None,
            backdrop_path=_text(row.get("backdrop_path")) or None,
            release_date=_text(row.get("release_date")) or None,
            vote_average=self.parse_float(row.get("vote_average")) or 0.0,
            vote_count=self.parse_int(row.get("vote_count")) or 0,
            tags=build_tags(title, overview, genres, tagline),
        )

    @staticmethod
    def parse_genres(value) -> List[str]:
        """Parse genre names from a Python-literal list of ``{'id', 'name'}`` dicts."""
        if not isinstance(value, str) or not value.strip():
            return []
        try:
            genres = ast.literal_eval(value)
        except (ValueError, SyntaxError):
            return []
        if not isinstance(genres, list):
            return []
        return [g["name"] for g in genres if isinstance(g, dict) and g.get("name")]

    @staticmethod
    def parse_int(value) -> Optional[int]:
        """Parse ``"42"`` or ``"42.0"``; anything else is None."""
        text = str(value).strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if number.is_integer() else None

    @staticmethod
    def parse_float(value) -> Optional[float]:
        try:
            result = float(str(value).strip())
        except (TypeError, ValueError):
            return None
        return None if pd.isna(result) else result

def _text(value) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value).strip()
