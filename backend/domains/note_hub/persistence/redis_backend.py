"""
Redis 键值后端

基于 redis.asyncio，连接在首次访问时建立。
"""

import logging
from typing import Optional

import redis.asyncio as redis

from .base import KeyValueBackend

logger = logging.getLogger(__name__)


class RedisBackend(KeyValueBackend):
    """
    Redis 键值后端

    使用示例:
        backend = RedisBackend("redis://localhost:6379/0")
        await backend.set("notes", "[]")
    """

    name = "redis"

    def __init__(self, redis_url: str, client: Optional["redis.Redis"] = None):
        self.redis_url = redis_url
        self._redis = client

    def __repr__(self) -> str:
        return f"RedisBackend(redis_url={self.redis_url!r})"

    @property
    def client(self) -> "redis.Redis":
        """延迟创建 Redis 客户端"""
        if self._redis is None:
            self._redis = redis.from_url(self.redis_url, decode_responses=True)
            logger.info(f"redis_backend_connected: {self.redis_url}")
        return self._redis

    async def get(self, key: str) -> Optional[str]:
        value = await self.client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        await self.client.set(key, value)

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
