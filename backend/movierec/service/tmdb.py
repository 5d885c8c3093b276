"""TMDB metadata API client with retries and an optional response cache."""

import time
from typing import Any, Dict, List, Optional

import requests
import structlog

from .cache import RedisCache
from .config import config
from ..data.documents import backdrop_url, poster_url

logger = structlog.get_logger(__name__)

HOME_CATEGORIES = {
    'trending': ('/trending/movie/day', {}),
    'top_rated': ('/movie/top_rated', {}),
    'upcoming': ('/movie/upcoming', {}),
    'now_playing': ('/movie/now_playing', {}),
    'best_2024': ('/discover/movie', {
        'primary_release_year': 2024,
        'sort_by': 'vote_average.desc',
        'vote_count.gte': 100,
    }),
}

class TMDBError(RuntimeError):
    """Raised when a TMDB request fails after all retries."""

class TMDBClient:
    """Thin GET client for the TMDB v3 API."""

    def __init__(self,
                 api_key: str = None,
                 base_url: str = None,
                 retries: int = None,
                 timeout: float = None,
                 retry_delay: float = None,
                 session: requests.Session = None,
                 cache: Optional[RedisCache] = None):
        self.api_key = api_key if api_key is not None else config.TMDB_API_KEY
        self.base_url = (base_url or config.TMDB_BASE_URL).rstrip('/')
        self.retries = max(1, retries if retries is not None else config.TMDB_RETRIES)
        self.timeout = timeout if timeout is not None else config.TMDB_TIMEOUT_S
        self.retry_delay = retry_delay if retry_delay is not None else config.TMDB_RETRY_DELAY_S
        self.session = session or requests.Session()
        self.cache = cache

    def _cache_key(self, path: str, params: Dict[str, Any]) -> str:
        query = "&".join(f"{k}={params[k]}" for k in sorted(params))
        return f"{path}?{query}"

    def get(self, path: str, params: Dict[str, Any] = None) -> Dict[str, Any]:
        """GET ``path`` and return the decoded JSON body."""
        params = dict(params or {})
        cache_key = self._cache_key(path, params)

        if self.cache is not None:
            cached = self.cache.get_json("tmdb", cache_key)
            if cached is not None:
                logger.debug("TMDB cache hit", path=path)
                return cached

        last_error = None
        for attempt in range(1, self.retries + 1):
            try:
                response = self.session.get(
                    f"{self.base_url}{path}",
                    params={**params, 'api_key': self.api_key},
                    timeout=self.timeout,
                )
                response.raise_for_status()
                data = response.json()
                break
            except (requests.RequestException, ValueError) as e:
                last_error = e
                logger.warning("TMDB request failed", path=path, attempt=attempt, error=str(e))
                if attempt < self.retries:
                    time.sleep(self.retry_delay)
        else:
            raise TMDBError(f"TMDB request to {path} failed after {self.retries} attempts: {last_error}")

        if self.cache is not None:
            self.cache.set_json("tmdb", cache_key, data)
        return data

    def home_feed(self, category: str = 'popular') -> Dict[str, Any]:
        """A home-page list by category; unknown names go to ``/movie/{category}``."""
        path, params = HOME_CATEGORIES.get(category, (f"/movie/{category}", {}))
        return self.get(path, params)

    def search(self, query: str) -> Dict[str, Any]:
        return self.get('/search/movie', {'query': query})

    def movie(self, movie_id: int) -> Dict[str, Any]:
        return self.get(f"/movie/{movie_id}")

    def similar(self, movie_id: int) -> Dict[str, Any]:
        return self.get(f"/movie/{movie_id}/similar")

def to_card(movie: Dict[str, Any]) -> Dict[str, Any]:
    """Shape a TMDB movie result as a list card."""
    return {
        'tmdb_id': movie.get('id'),
        'title': movie.get('title'),
        'poster_url': poster_url(movie.get('poster_path')),
        'release_date': movie.get('release_date'),
        'vote_average': movie.get('vote_average'),
    }

def to_cards(payload: Dict[str, Any], limit: int = None) -> List[Dict[str, Any]]:
    """Cards for the ``results`` list of a TMDB payload."""
    results = (payload or {}).get('results') or []
    if limit is not None:
        results = results[:limit]
    return [to_card(m) for m in results]

def to_detail(movie: Dict[str, Any]) -> Dict[str, Any]:
    """Shape a TMDB movie detail payload."""
    return {
        'tmdb_id': movie.get('id'),
        'title': movie.get('title'),
        'overview': movie.get('overview'),
        'release_date': movie.get('release_date'),
        'vote_average': movie.get('vote_average'),
        'poster_url': poster_url(movie.get('poster_path')),
        'backdrop_url': backdrop_url(movie.get('backdrop_path')),
        'genres': movie.get('genres') or [],
        'homepage': movie.get('homepage'),
    }
