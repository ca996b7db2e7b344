import json
import logging
from typing import Any, Protocol

import redis.asyncio as redis

from quizdesk.core.config import settings

logger = logging.getLogger(__name__)


class CacheBackend(Protocol):
    """조회 결과 캐시 인터페이스 (read-through / invalidate-on-write)"""

    async def get(self, key: str) -> Any | None: ...

    async def set_with_ttl(self, key: str, value: Any, ttl: int) -> None: ...

    async def delete(self, *keys: str) -> None: ...

    async def invalidate(self, pattern: str) -> int: ...


class RedisCache:
    """Redis 기반 JSON 스냅샷 캐시"""

    def __init__(self, client: redis.Redis):
        self._client = client

    async def get(self, key: str) -> Any | None:
        raw = await self._client.get(key)
        if raw is None:
            logger.debug(f"캐시 미스: {key}")
            return None
        logger.debug(f"캐시 히트: {key}")
        return json.loads(raw)

    async def set_with_ttl(self, key: str, value: Any, ttl: int) -> None:
        await self._client.set(key, json.dumps(value, ensure_ascii=False, default=str), ex=ttl)

    async def delete(self, *keys: str) -> None:
        if keys:
            await self._client.delete(*keys)
            logger.debug(f"캐시 삭제: {keys}")

    async def invalidate(self, pattern: str) -> int:
        """glob 패턴과 일치하는 모든 키 삭제 (SCAN 사용, KEYS 미사용)"""
        keys = [key async for key in self._client.scan_iter(match=pattern, count=100)]
        if keys:
            await self._client.delete(*keys)
        logger.debug(f"캐시 패턴 삭제: pattern={pattern}, count={len(keys)}")
        return len(keys)

    async def close(self) -> None:
        await self._client.aclose()


_cache: RedisCache | None = None


def init_cache(redis_url: str | None = None) -> RedisCache:
    """Redis 클라이언트 생성 (앱 시작 시 1회)"""
    global _cache
    if _cache is None:
        client = redis.Redis.from_url(redis_url or settings.redis_url, decode_responses=True)
        _cache = RedisCache(client)
        logger.info("Redis 캐시 초기화 완료")
    return _cache


async def close_cache() -> None:
    global _cache
    if _cache is not None:
        await _cache.close()
        logger.info("Redis 캐시 종료")
    _cache = None


def get_cache() -> CacheBackend:
    """요청 단위 캐시 의존성"""
    if _cache is None:
        return init_cache()
    return _cache
