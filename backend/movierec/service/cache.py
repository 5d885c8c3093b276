"""Redis cache for metadata API responses."""

import json
from typing import Any, Optional

import redis
import structlog

from .config import config

logger = structlog.get_logger(__name__)

class RedisCache:
    """Redis cache wrapper. Every operation fails soft."""

    def __init__(self, client: redis.Redis = None, ttl: int = None):
        """Initialize Redis connection."""
        self.redis_client = client or redis.Redis(
            host=config.REDIS_HOST,
            port=config.REDIS_PORT,
            db=config.REDIS_DB,
            socket_connect_timeout=1,
        )
        self.ttl = ttl if ttl is not None else config.REDIS_TTL

    def _get_key(self, prefix: str, identifier: str) -> str:
        """Generate Redis key."""
        return f"movierec:{prefix}:{identifier}"

    def get_json(self, prefix: str, identifier: str) -> Optional[Any]:
        """Get a cached JSON value."""
        try:
            data = self.redis_client.get(self._get_key(prefix, identifier))
            if data:
                return json.loads(data)
            return None
        except Exception as e:
            logger.error("Failed to read cache", prefix=prefix, key=identifier, error=str(e))
            return None

    def set_json(self, prefix: str, identifier: str, value: Any) -> bool:
        """Cache a JSON-serializable value with the configured TTL."""
        try:
            data = json.dumps(value, default=str)
            return bool(self.redis_client.setex(self._get_key(prefix, identifier), self.ttl, data))
        except Exception as e:
            logger.error("Failed to write cache", prefix=prefix, key=identifier, error=str(e))
            return False

    def health_check(self) -> bool:
        """Check Redis connection health."""
        try:
            return bool(self.redis_client.ping())
        except Exception as e:
            logger.error("Redis health check failed", error=str(e))
            return False

# Global cache instance
cache = RedisCache()
