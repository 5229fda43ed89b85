import logging
from typing import Optional
import redis.exceptions
from shortlinks.utils.encoding import normalize_short_code

logger = logging.getLogger(__name__)
CACHE_TTL = 86400


class RedisURLCache:
    """Look-aside cache of short code -> long URL.

    Short links never change after creation, so entries only expire by TTL.
    A missing client or an unreachable Redis degrades to cache misses.
    """

    def __init__(self, client=None, ttl: int = CACHE_TTL):
        self.client = client
        self.ttl = ttl

    @staticmethod
    def key(short_code: str) -> str:
        return f"url:{normalize_short_code(short_code)}"

    def get(self, short_code: str) -> Optional[str]:
        if self.client is None:
            return None

        try:
            cached_url = self.client.get(self.key(short_code))
        except redis.exceptions.RedisError:
            logger.warning(f"Redis lookup failed for {short_code}")
            return None

        if cached_url:
            cached_decoded = cached_url.decode() if isinstance(cached_url, (bytes, bytearray)) else str(cached_url)
            logger.info(f"Redirect cache HIT for {short_code} -> {cached_decoded[:50]}")
            return cached_decoded

        return None

    def put(self, short_code: str, long_url: str) -> None:
        if self.client is None:
            return

        try:
            self.client.setex(self.key(short_code), self.ttl, long_url)
            logger.debug(f"Cached {short_code} -> {long_url[:50]}")
        except redis.exceptions.RedisError:
            logger.warning(f"Failed to cache {short_code}, Redis unavailable")
