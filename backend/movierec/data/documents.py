"""Movie documents as stored in the corpus, plus text normalization helpers."""

import re
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterable, List, Optional

from ..service.config import config

_NON_LETTERS = re.compile(r"[^a-zA-Z\s]")

def normalize_text(text: Optional[str]) -> str:
    """Lower-case and keep only ASCII letters and whitespace."""
    if not text:
        return ""
    return _NON_LETTERS.sub("", text.lower()).strip()

def build_tags(title: str, overview: str, genre_names: Iterable[str], tagline: str) -> str:
    """Build the searchable tag string for a movie.

    The title is included so that sequels sharing few overview words still
    match each other.
    """
    genres = " ".join(genre_names or [])
    return normalize_text(f"{title or ''} {overview or ''} {genres} {tagline or ''}")

def tokenize(text: Optional[str]) -> List[str]:
    """Split normalized text on whitespace."""
    return (text or "").split()

def poster_url(poster_path: Optional[str]) -> str:
    """Resolve a TMDB poster path to an absolute URL."""
    if not poster_path:
        return config.POSTER_PLACEHOLDER
    if poster_path.startswith("http"):
        return poster_path
    separator = "" if poster_path.startswith("/") else "/"
    return f"{config.POSTER_BASE_URL}{separator}{poster_path}"

def backdrop_url(backdrop_path: Optional[str]) -> Optional[str]:
    """Resolve a TMDB backdrop path, or None when there is none."""
    if not backdrop_path:
        return None
    if backdrop_path.startswith("http"):
        return backdrop_path
    separator = "" if backdrop_path.startswith("/") else "/"
    return f"{config.BACKDROP_BASE_URL}{separator}{backdrop_path}"

@dataclass
class Document:
    """One movie's searchable profile."""

    id: int
    title: str
    tags: str = ""
    overview: str = ""
    genres: List[str] = field(default_factory=list)
    release_date: Optional[str] = None
    vote_average: float = 0.0
    vote_count: int = 0
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict of all fields."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        """Build a document from a dict, ignoring unknown keys."""
        known = {name: data[name] for name in cls.__dataclass_fields__ if name in data}
        known["id"] = int(known["id"])
        # Parquet hands list cells back as numpy arrays
        genres = known.get("genres")
        known["genres"] = [] if genres is None else [str(g) for g in genres]
        return cls(**known)
