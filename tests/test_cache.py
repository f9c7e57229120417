"""Tests for the Redis cache service, with a mocked client."""
import json
from unittest.mock import MagicMock

import redis

from storefront.utils.cache import CacheService


def test_get_returns_decoded_value():
    client = MagicMock()
    client.get.return_value = json.dumps({"stock": 3})
    cache = CacheService(client=client, ttl=60, enabled=True)

    assert cache.get("product", "abc") == {"stock": 3}
    client.get.assert_called_once_with("product:abc")


def test_set_uses_ttl():
    client = MagicMock()
    cache = CacheService(client=client, ttl=60, enabled=True)

    assert cache.set("product", "abc", {"stock": 3}) is True
    client.setex.assert_called_once_with("product:abc", 60, json.dumps({"stock": 3}))


def test_redis_errors_degrade_to_miss():
    client = MagicMock()
    client.get.side_effect = redis.ConnectionError("down")
    client.delete.side_effect = redis.ConnectionError("down")
    cache = CacheService(client=client, ttl=60, enabled=True)

    assert cache.get("product", "abc") is None
    assert cache.delete("product", "abc") is False
    assert cache.delete_many("product", ["a", "b"]) == 0


def test_delete_many_single_round_trip():
    client = MagicMock()
    client.delete.return_value = 2
    cache = CacheService(client=client, ttl=60, enabled=True)

    assert cache.delete_many("product", ["a", "b"]) == 2
    client.delete.assert_called_once_with("product:a", "product:b")


def test_disabled_cache_never_calls_redis():
    client = MagicMock()
    cache = CacheService(client=client, ttl=60, enabled=False)

    assert cache.get("product", "abc") is None
    assert cache.set("product", "abc", {}) is False
    assert cache.delete_many("product", ["a"]) == 0
    assert client.mock_calls == []
