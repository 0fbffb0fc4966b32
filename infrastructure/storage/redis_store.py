"""Redis-backed KeyValueStore.

Uses the synchronous redis client because the store contract is
synchronous. Entries get a TTL so abandoned sign-in attempts do not
accumulate; the TTL comfortably outlives the code validity window.
"""

from typing import Optional

import redis
from redis.exceptions import RedisError

from errors import StorageError
from shared.logging import get_logger

log = get_logger(__name__)


class RedisStore:
    def __init__(
        self,
        redis_client: redis.Redis,
        ttl_seconds: int = 3600,
        namespace: str = "vulniq",
    ) -> None:
        self._redis = redis_client
        self.ttl_seconds = ttl_seconds
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            return self._redis.get(self._key(key))
        except RedisError as e:
            raise StorageError("Redis read failed", details={"error": str(e)}) from e

    def set(self, key: str, value: str) -> None:
        try:
            if self.ttl_seconds > 0:
                self._redis.setex(self._key(key), self.ttl_seconds, value)
            else:
                self._redis.set(self._key(key), value)
        except RedisError as e:
            raise StorageError("Redis write failed", details={"error": str(e)}) from e

    def remove(self, key: str) -> None:
        try:
            self._redis.delete(self._key(key))
        except RedisError as e:
            raise StorageError("Redis delete failed", details={"error": str(e)}) from e


def create_redis_store(redis_uri: str, ttl_seconds: int = 3600) -> Optional[RedisStore]:
    """Connect to Redis and return a store, or None on failure."""
    try:
        client: redis.Redis = redis.Redis.from_url(redis_uri, decode_responses=True)
        client.ping()
        log.info("redis_connected", uri=redis_uri.split("@")[-1])  # mask credentials
        return RedisStore(client, ttl_seconds=ttl_seconds)
    except RedisError as e:
        log.warning(
            "redis_connection_failed", error=str(e), error_type=type(e).__name__
        )
        return None
    except ValueError as e:
        log.warning("redis_uri_invalid", error=str(e))
        return None
