# cartstore/repos/redis_storage.py
import asyncio

import redis
from redis.exceptions import RedisError

from cartstore.utils.retry import redis_retry
from cartstore.utils.settings import REDIS_URL
from cartstore.utils.logging import get_logger

logger = get_logger(__name__)


class RedisStorage:
    """
    Alternatywny magazyn na Redisie. Bledy sa ponawiane (tenacity),
    a po wyczerpaniu prob logowane i polykane jak w kazdym adapterze.
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None, prefix: str = "persist:"):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    @redis_retry()
    def _get(self, key: str) -> str | None:
        return self.redis.get(self._key(key))

    @redis_retry()
    def _set(self, key: str, value: str) -> None:
        self.redis.set(self._key(key), value)

    @redis_retry()
    def _delete(self, key: str) -> None:
        self.redis.delete(self._key(key))

    async def get_item(self, key: str) -> str | None:
        try:
            return await asyncio.to_thread(self._get, key)
        except RedisError as e:
            logger.error(f"Redis read failed for {key}: {e}")
            return None

    async def set_item(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._set, key, value)
        except RedisError as e:
            logger.error(f"Redis write failed for {key}: {e}")

    async def remove_item(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._delete, key)
        except RedisError as e:
            logger.error(f"Redis delete failed for {key}: {e}")
