import redis
from typing import Optional

from app.config import settings

# Created lazily on first use
redis_client: Optional[redis.Redis] = None


def get_redis_client() -> redis.Redis:
    """Get or create the shared Redis client"""
    global redis_client
    if redis_client is None:
        redis_client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
            decode_responses=True,  # Automatically decode bytes to strings
            socket_connect_timeout=5,
            socket_timeout=5,
        )
    return redis_client
