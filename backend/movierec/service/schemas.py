"""Pydantic schemas for API responses."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

class MovieCard(BaseModel):
    """Movie as shown in lists."""
    tmdb_id: int = Field(..., description="TMDB movie ID")
    title: Optional[str] = Field(None, description="Movie title")
    poster_url: str = Field(..., description="Absolute poster URL or placeholder")
    release_date: Optional[str] = Field(None, description="Release date (YYYY-MM-DD)")
    vote_average: Optional[float] = Field(None, description="Average vote, 0-10")

class RecommendationItem(MovieCard):
    """Similar movie. ``score`` is set for local content-based results only."""
    score: Optional[float] = Field(None, gt=0, le=1, description="Cosine similarity to the target")

class Genre(BaseModel):
    id: Optional[int] = None
    name: str

class MovieDetail(BaseModel):
    """Movie details page."""
    tmdb_id: int = Field(..., description="TMDB movie ID")
    title: Optional[str] = Field(None, description="Movie title")
    overview: Optional[str] = Field(None, description="Synopsis")
    release_date: Optional[str] = Field(None, description="Release date (YYYY-MM-DD)")
    vote_average: Optional[float] = Field(None, description="Average vote, 0-10")
    poster_url: str = Field(..., description="Absolute poster URL or placeholder")
    backdrop_url: Optional[str] = Field(None, description="Absolute backdrop URL")
    genres: List[Genre] = Field(default_factory=list, description="Genres")
    homepage: Optional[str] = Field(None, description="Official homepage")

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="Service version")
    corpus_size: int = Field(..., description="Documents in the local corpus")
