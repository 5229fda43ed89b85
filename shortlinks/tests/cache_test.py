import redis.exceptions

from shortlinks.services.RedisURLCache import RedisURLCache


class DictRedis:
    def __init__(self):
        self.values = {}
        self.ttls = {}

    def get(self, key):
        return self.values.get(key)

    def setex(self, key, ttl, value):
        self.values[key] = value
        self.ttls[key] = ttl


class DownRedis:
    def get(self, key):
        raise redis.exceptions.ConnectionError("connection refused")

    def setex(self, key, ttl, value):
        raise redis.exceptions.ConnectionError("connection refused")


def test_put_then_get():
    client = DictRedis()
    cache = RedisURLCache(client, ttl=60)

    cache.put("AbC", "https://example.com/x")
    assert client.values == {"url:abc": "https://example.com/x"}
    assert client.ttls == {"url:abc": 60}
    assert cache.get("abc") == "https://example.com/x"


def test_get_decodes_bytes():
    client = DictRedis()
    client.values["url:abc"] = b"https://example.com/bytes"
    assert RedisURLCache(client).get("abc") == "https://example.com/bytes"


def test_miss():
    assert RedisURLCache(DictRedis()).get("abc") is None


def test_disabled_cache_is_noop():
    cache = RedisURLCache(None)
    cache.put("abc", "https://example.com")
    assert cache.get("abc") is None


def test_unreachable_redis_degrades_to_miss():
    cache = RedisURLCache(DownRedis())
    cache.put("abc", "https://example.com")
    assert cache.get("abc") is None
