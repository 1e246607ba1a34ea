"""
Redis cache for serialized article list pages.

Page keys embed a generation number (``articles:list:gen``).  A write
bumps the generation with a single INCR, so every cached page becomes
unreachable at once and simply expires after its TTL; there is no key
scan on the write path.

Redis is optional.  When it is not configured or not reachable every read
is a miss and every write is skipped, so requests fall through to the
database.
"""
import json
import logging

import redis.asyncio as redis

from article_admin.config import settings

logger = logging.getLogger(__name__)

GENERATION_KEY = "articles:list:gen"


class PageCache:
    def __init__(self) -> None:
        self._redis: redis.Redis | None = None
        self._hits = 0
        self._misses = 0

    async def connect(self) -> None:
        """Open the pool at startup; a failed ping leaves the cache disabled."""
        client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await client.ping()
        except Exception as exc:  # pragma: no cover
            logger.warning("Redis unavailable at %s, page cache disabled: %s", settings.REDIS_URL, exc)
            await client.aclose()
            return
        self._redis = client
        logger.info("Page cache connected: %s", settings.REDIS_URL)

    async def disconnect(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    async def _page_key(self, page: int, limit: int) -> str:
        generation = await self._redis.get(GENERATION_KEY) or "0"
        return f"articles:list:{generation}:{page}:{limit}"

    async def get_page(self, page: int, limit: int) -> dict | None:
        if not self._redis:
            self._misses += 1
            return None
        try:
            raw = await self._redis.get(await self._page_key(page, limit))
        except Exception as exc:
            logger.debug("Page cache read failed for page=%d limit=%d: %s", page, limit, exc)
            raw = None
        if raw is None:
            self._misses += 1
            return None
        self._hits += 1
        return json.loads(raw)

    async def set_page(self, page: int, limit: int, payload: dict) -> None:
        if not self._redis:
            return
        try:
            key = await self._page_key(page, limit)
            await self._redis.set(key, json.dumps(payload), ex=settings.CACHE_TTL_LIST)
        except Exception as exc:
            logger.debug("Page cache write failed for page=%d limit=%d: %s", page, limit, exc)

    async def invalidate(self) -> None:
        """Called after every article create/update/delete."""
        if not self._redis:
            return
        try:
            generation = await self._redis.incr(GENERATION_KEY)
            logger.debug("Page cache generation bumped to %d", generation)
        except Exception as exc:
            logger.warning("Page cache invalidation failed: %s", exc)

    @property
    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "enabled": self._redis is not None,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total else 0.0,
        }


cache = PageCache()
