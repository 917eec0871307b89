"""
Tests for the Redis response cache helpers.

CHANGELOG:
- 2026-10-19: Initial creation
"""

import json
from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest

from webmeter.cache.redis_client import get_cached, is_cacheable, make_cache_key, set_cached

REDIS_URL = "redis://localhost:6379/0"


def _mock_redis_client(cached_value: str | None = None) -> AsyncMock:
    client = AsyncMock()
    client.get = AsyncMock(return_value=cached_value)
    client.set = AsyncMock()
    client.aclose = AsyncMock()
    return client


class TestCacheKey:
    """Key layout and cacheability."""

    def test_key_sorts_and_dedupes_ids(self) -> None:
        key = make_cache_key(
            "charge", [4, 1, 4], datetime(2026, 10, 1, 0, 0), datetime(2026, 10, 18, 23, 59)
        )
        assert key == "webmeter:charge:1,4:2026-10-01T00:00:00:2026-10-18T23:59:00"

    def test_key_without_ids(self) -> None:
        key = make_cache_key("dashboard", (), datetime(2026, 10, 1), datetime(2026, 10, 1, 8))
        assert key == "webmeter:dashboard:all:2026-10-01T00:00:00:2026-10-01T08:00:00"

    def test_closed_window_is_cacheable(self) -> None:
        now = datetime(2026, 10, 19, 12, 30, 15)
        assert is_cacheable(datetime(2026, 10, 19, 12, 29), now) is True

    def test_window_reaching_current_minute_is_not_cacheable(self) -> None:
        now = datetime(2026, 10, 19, 12, 30, 15)
        assert is_cacheable(datetime(2026, 10, 19, 12, 30), now) is False
        assert is_cacheable(datetime(2026, 10, 19, 23, 59), now) is False


class TestCacheAccess:
    """Best-effort reads and writes."""

    @pytest.mark.asyncio
    async def test_disabled_when_url_empty(self) -> None:
        with patch("webmeter.cache.redis_client.get_redis") as mock_get_redis:
            assert await get_cached("", "k") is None
            await set_cached("", "k", {"a": 1}, 60)
            mock_get_redis.assert_not_called()

    @pytest.mark.asyncio
    @patch("webmeter.cache.redis_client.get_redis")
    async def test_hit_decodes_json(self, mock_get_redis: AsyncMock) -> None:
        client = _mock_redis_client(json.dumps({"success": True}))
        mock_get_redis.return_value = client

        assert await get_cached(REDIS_URL, "k") == {"success": True}
        client.get.assert_awaited_once_with("k")
        client.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    @patch("webmeter.cache.redis_client.get_redis")
    async def test_miss_returns_none(self, mock_get_redis: AsyncMock) -> None:
        mock_get_redis.return_value = _mock_redis_client(None)
        assert await get_cached(REDIS_URL, "k") is None

    @pytest.mark.asyncio
    @patch("webmeter.cache.redis_client.get_redis")
    async def test_undecodable_entry_is_a_miss(self, mock_get_redis: AsyncMock) -> None:
        mock_get_redis.return_value = _mock_redis_client("{not json")
        assert await get_cached(REDIS_URL, "k") is None

    @pytest.mark.asyncio
    @patch("webmeter.cache.redis_client.get_redis")
    async def test_read_failure_is_swallowed(self, mock_get_redis: AsyncMock) -> None:
        client = _mock_redis_client()
        client.get = AsyncMock(side_effect=ConnectionError("redis down"))
        mock_get_redis.return_value = client

        assert await get_cached(REDIS_URL, "k") is None
        client.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    @patch("webmeter.cache.redis_client.get_redis")
    async def test_write_sets_ttl(self, mock_get_redis: AsyncMock) -> None:
        client = _mock_redis_client()
        mock_get_redis.return_value = client

        await set_cached(REDIS_URL, "k", {"a": 1}, 60)

        client.set.assert_awaited_once_with("k", json.dumps({"a": 1}), ex=60)

    @pytest.mark.asyncio
    @patch("webmeter.cache.redis_client.get_redis")
    async def test_write_failure_is_swallowed(self, mock_get_redis: AsyncMock) -> None:
        mock_get_redis.side_effect = ConnectionError("redis down")
        await set_cached(REDIS_URL, "k", {"a": 1}, 60)
