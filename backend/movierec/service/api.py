"""FastAPI service for browsing movies and content-based recommendations."""

import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

from .cache import cache
from .config import config
from .log import configure_logging
from .schemas import HealthResponse, MovieCard, MovieDetail, RecommendationItem
from .tmdb import TMDBClient, TMDBError, to_cards, to_detail
from ..data.store import CorpusStore, InMemoryCorpusStore
from ..pipeline.engine import RecommendationEngine

configure_logging()

logger = structlog.get_logger(__name__)

VERSION = "1.0.0"

# Prometheus metrics
REQUEST_COUNT = Counter('movierec_requests_total', 'Total API requests', ['endpoint'])
REQUEST_LATENCY = Histogram('movierec_request_duration_seconds', 'Request latency', ['endpoint'])
ERROR_COUNT = Counter('movierec_errors_total', 'Total errors', ['endpoint', 'error_type'])

# Service collaborators, created on startup or on first use
state: Dict[str, Any] = {
    'store': None,
    'engine': None,
    'tmdb': None,
}

app = FastAPI(
    title="Movie Recommender",
    description="Movie browsing backed by TMDB with content-based recommendations over a local corpus",
    version=VERSION
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def load_corpus(path: str = None) -> CorpusStore:
    """Load the seeded corpus, or start empty when it has not been built."""
    path = Path(path or config.CORPUS_PATH)
    if not path.exists():
        logger.warning("Corpus not found, starting with an empty store", path=str(path))
        return InMemoryCorpusStore()
    return InMemoryCorpusStore.load(str(path))

def get_store() -> CorpusStore:
    if state['store'] is None:
        state['store'] = load_corpus()
    return state['store']

def get_engine() -> RecommendationEngine:
    if state['engine'] is None:
        state['engine'] = RecommendationEngine(get_store())
    return state['engine']

def get_tmdb() -> TMDBClient:
    if state['tmdb'] is None:
        state['tmdb'] = TMDBClient(cache=cache)
    return state['tmdb']

@app.on_event("startup")
async def startup_event():
    """Load the corpus and build collaborators."""
    logger.info("Starting recommendation service")

    if not cache.health_check():
        logger.warning("Redis connection failed, continuing without cache")

    get_engine()
    get_tmdb()

    logger.info("Recommendation service started", corpus_size=get_store().count())

@app.get("/health", response_model=HealthResponse)
async def health_check(store: CorpusStore = Depends(get_store)):
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(),
        version=VERSION,
        corpus_size=store.count()
    )

@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

router = APIRouter(prefix="/api/movies")

def _observe(endpoint: str, start_time: float):
    REQUEST_LATENCY.labels(endpoint=endpoint).observe(time.time() - start_time)

async def _similar_from_tmdb(tmdb: TMDBClient, movie_id: int) -> List[Dict[str, Any]]:
    payload = await run_in_threadpool(tmdb.similar, movie_id)
    return to_cards(payload, limit=config.SIMILAR_FALLBACK_LIMIT)

# Static routes first

@router.get("/home", response_model=List[MovieCard])
async def home_feed(category: str = 'popular', tmdb: TMDBClient = Depends(get_tmdb)):
    """Trending, popular, top rated, upcoming and similar home sections."""
    REQUEST_COUNT.labels(endpoint='home').inc()
    try:
        payload = await run_in_threadpool(tmdb.home_feed, category)
    except TMDBError as e:
        ERROR_COUNT.labels(endpoint='home', error_type='tmdb').inc()
        logger.error("Section fetch failed", category=category, error=str(e))
        return []
    return to_cards(payload)

@router.get("/search")
async def search_movies(query: Optional[str] = None, tmdb: TMDBClient = Depends(get_tmdb)):
    """Proxy a TMDB title search."""
    REQUEST_COUNT.labels(endpoint='search').inc()
    if not query:
        raise HTTPException(status_code=400, detail="Query is required")
    try:
        return await run_in_threadpool(tmdb.search, query)
    except TMDBError as e:
        ERROR_COUNT.labels(endpoint='search', error_type='tmdb').inc()
        logger.error("Search failed", query=query, error=str(e))
        raise HTTPException(status_code=500, detail="Search failed")

@router.get("/recommend-by-title", response_model=List[RecommendationItem])
async def recommend_by_title(title: Optional[str] = None,
                             store: CorpusStore = Depends(get_store),
                             engine: RecommendationEngine = Depends(get_engine),
                             tmdb: TMDBClient = Depends(get_tmdb)):
    """Recommend from the local corpus, falling back to TMDB's similar list."""
    start_time = time.time()
    REQUEST_COUNT.labels(endpoint='recommend_by_title').inc()
    if not title:
        raise HTTPException(status_code=400, detail="Title is required")

    try:
        local_movie = store.find_by_title_exact(title)
        if local_movie is None:
            try:
                search = await run_in_threadpool(tmdb.search, title)
                results = (search or {}).get('results') or []
                if not results:
                    return []
                return await _similar_from_tmdb(tmdb, results[0]['id'])
            except TMDBError as e:
                ERROR_COUNT.labels(endpoint='recommend_by_title', error_type='tmdb').inc()
                logger.error("TMDB search/similar failed", title=title, error=str(e))
                return []

        recommendations = await engine.arecommend(local_movie, timeout=config.RETRIEVAL_TIMEOUT_S)
        return [r.to_dict() for r in recommendations]
    except Exception as e:
        ERROR_COUNT.labels(endpoint='recommend_by_title', error_type='exception').inc()
        logger.error("Recommendation failed", title=title, error=str(e))
        raise HTTPException(status_code=500, detail="Recommendation failed")
    finally:
        _observe('recommend_by_title', start_time)

# Parameterized routes last

@router.get("/{movie_id}", response_model=MovieDetail)
async def movie_details(movie_id: int, tmdb: TMDBClient = Depends(get_tmdb)):
    """Movie details from TMDB."""
    REQUEST_COUNT.labels(endpoint='details').inc()
    try:
        payload = await run_in_threadpool(tmdb.movie, movie_id)
    except TMDBError as e:
        ERROR_COUNT.labels(endpoint='details', error_type='tmdb').inc()
        logger.error("Failed to fetch movie details", movie_id=movie_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch movie details")
    return to_detail(payload)

@router.get("/{movie_id}/recommendations", response_model=List[RecommendationItem])
async def movie_recommendations(movie_id: int,
                                store: CorpusStore = Depends(get_store),
                                engine: RecommendationEngine = Depends(get_engine),
                                tmdb: TMDBClient = Depends(get_tmdb)):
    """Recommendations for a movie id, local corpus first."""
    start_time = time.time()
    REQUEST_COUNT.labels(endpoint='recommendations').inc()
    try:
        local_movie = store.find_by_id(movie_id)
        if local_movie is not None:
            recommendations = await engine.arecommend(local_movie, timeout=config.RETRIEVAL_TIMEOUT_S)
            return [r.to_dict() for r in recommendations]
        return await _similar_from_tmdb(tmdb, movie_id)
    except Exception as e:
        ERROR_COUNT.labels(endpoint='recommendations', error_type='exception').inc()
        logger.error("Failed to fetch recommendations", movie_id=movie_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch recommendations")
    finally:
        _observe('recommendations', start_time)

app.include_router(router)
