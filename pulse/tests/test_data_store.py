"""
Tests for the single-flight JSON file cache.
"""

import asyncio
import json
from unittest.mock import patch

import httpx
import pytest

from pulse.core import data_store
from pulse.core.config import Settings
from pulse.core.data_store import DataFileCache


@pytest.mark.asyncio
class TestDataFileCache:
    """Local reads, single-flight sharing and failure eviction."""

    async def test_reads_local_file(self, cache: DataFileCache) -> None:
        raw = await cache.fetch('/data/github-history.json')
        assert raw['lastUpdated'] == '2024-07-01T00:00:00Z'
        assert '/data/github-history.json' in cache
        assert len(cache) == 1

    async def test_concurrent_requests_share_one_read(self, cache: DataFileCache) -> None:
        calls = []

        def fake_read(path):
            calls.append(path)
            return {"path": path}

        with patch.object(DataFileCache, '_read_local', side_effect=fake_read):
            results = await asyncio.gather(*(cache.fetch('/data/x.json') for _ in range(5)))
            again = await cache.fetch('/data/x.json')

        assert calls == ['/data/x.json']
        assert all(r == {"path": '/data/x.json'} for r in results)
        assert again is results[0]

    async def test_failure_is_evicted_and_retried(self, cache: DataFileCache) -> None:
        with patch.object(DataFileCache, '_read_local', side_effect=[OSError('disk'), {"ok": True}]) as reader:
            with pytest.raises(OSError):
                await cache.fetch('/data/flaky.json')
            assert '/data/flaky.json' not in cache

            assert await cache.fetch('/data/flaky.json') == {"ok": True}
            assert reader.call_count == 2

    async def test_missing_file_raises(self, cache: DataFileCache) -> None:
        with pytest.raises(FileNotFoundError):
            await cache.fetch('/data/does-not-exist.json')
        assert len(cache) == 0

    async def test_invalid_json_raises(self, cache: DataFileCache) -> None:
        with pytest.raises(json.JSONDecodeError):
            await cache.fetch('/data/history/broken.json')

    async def test_cancelled_waiter_does_not_cancel_shared_read(self, cache: DataFileCache) -> None:
        release = asyncio.Event()

        async def slow_read(path):
            await release.wait()
            return {"done": True}

        with patch.object(DataFileCache, '_read', side_effect=slow_read):
            first = asyncio.create_task(cache.fetch('/data/slow.json'))
            second = asyncio.create_task(cache.fetch('/data/slow.json'))
            await asyncio.sleep(0)
            first.cancel()
            release.set()

            assert await second == {"done": True}
            with pytest.raises(asyncio.CancelledError):
                await first
        assert '/data/slow.json' in cache

    async def test_clear(self, cache: DataFileCache) -> None:
        await cache.fetch('/data/github-history.json')
        cache.clear()
        assert len(cache) == 0


@pytest.mark.asyncio
class TestRemoteReads:
    """Reads through httpx when a base URL is configured."""

    async def test_fetches_over_http(self, tmp_path) -> None:
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(request.url.path)
            return httpx.Response(200, json={"daily": []})

        cache = DataFileCache(Settings(data_root=str(tmp_path), data_base_url='https://data.example.com/'))
        cache._http_client = httpx.AsyncClient(
            base_url='https://data.example.com',
            transport=httpx.MockTransport(handler),
        )

        assert cache.is_remote
        assert await cache.fetch('/data/history/discord.json') == {"daily": []}
        assert requested == ['/data/history/discord.json']
        await cache.close()
        assert cache._http_client is None

    async def test_error_status_raises(self, tmp_path) -> None:
        cache = DataFileCache(Settings(data_root=str(tmp_path), data_base_url='https://data.example.com'))
        cache._http_client = httpx.AsyncClient(
            base_url='https://data.example.com',
            transport=httpx.MockTransport(lambda request: httpx.Response(404)),
        )

        with pytest.raises(httpx.HTTPStatusError):
            await cache.fetch('/data/missing.json')
        assert len(cache) == 0
        await cache.close()


@pytest.mark.asyncio
class TestSingletonLifecycle:
    """init_data_store / get_data_store / close_data_store."""

    async def test_init_get_close(self, test_settings: Settings) -> None:
        await data_store.close_data_store()

        store = await data_store.init_data_store(test_settings)
        assert data_store.get_data_store() is store
        assert await data_store.init_data_store() is store

        await data_store.close_data_store()
        assert data_store._store is None
