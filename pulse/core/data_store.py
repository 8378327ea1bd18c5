"""
Process-wide cache of parsed JSON history files.

Every loader reads its backing file through DataFileCache.fetch(). The cache
maps a registry file path (e.g. '/data/history/github.json') to an asyncio
Task producing the parsed JSON, which gives three guarantees:

- Single-flight: concurrent first requests for one path share one read.
- Shielded: a cancelled awaiter does not cancel the shared read for others.
- Retry after failure: a failed read is evicted, so the next call re-reads.

Successful results stay cached for the process lifetime; clear() resets the
cache (used by tests and reloads).

Files are read from `settings.data_root` on disk in a worker thread, or, when
`settings.data_base_url` is configured, fetched over HTTP with httpx.

Module-level lifecycle mirrors an application-wide connection pool:

    # FastAPI lifespan
    await init_data_store()
    yield
    await close_data_store()

    # Anywhere else
    store = get_data_store()
    raw = await store.fetch('/data/history/github.json')
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from pulse.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class DataFileCache:
    """
    Single-flight JSON file cache.

    Args:
        settings: Source of data_root / data_base_url / fetch timeout.
            Defaults to get_settings().
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._tasks: Dict[str, asyncio.Task] = {}
        self._http_client: Optional[httpx.AsyncClient] = None

    @property
    def is_remote(self) -> bool:
        return bool(self.settings.data_base_url)

    def __contains__(self, path: str) -> bool:
        return path in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    async def fetch(self, path: str) -> Any:
        """
        Return the parsed JSON for a registry file path.

        Raises:
            FileNotFoundError / OSError: Local file missing or unreadable.
            httpx.HTTPError: Remote fetch failed or returned an error status.
            json.JSONDecodeError: File content is not valid JSON.
        """
        task = self._tasks.get(path)
        if task is None:
            logger.debug(f"Cache miss for {path}")
            task = asyncio.create_task(self._read(path))
            task.add_done_callback(lambda done, key=path: self._evict_failed(key, done))
            self._tasks[path] = task

        return await asyncio.shield(task)

    def _evict_failed(self, path: str, task: asyncio.Task) -> None:
        if task.cancelled() or task.exception() is not None:
            # Only drop the entry if it still points at this task
            if self._tasks.get(path) is task:
                del self._tasks[path]

    async def _read(self, path: str) -> Any:
        if self.is_remote:
            return await self._read_remote(path)
        return await asyncio.to_thread(self._read_local, path)

    def _read_local(self, path: str) -> Any:
        file_path = Path(self.settings.data_root) / path.lstrip('/')
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)

    async def _read_remote(self, path: str) -> Any:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.settings.data_base_url.rstrip('/'),
                timeout=self.settings.fetch_timeout_seconds,
            )
        response = await self._http_client.get(path)
        response.raise_for_status()
        return response.json()

    def clear(self) -> None:
        """Forget every cached and in-flight entry."""
        self._tasks.clear()

    async def close(self) -> None:
        """Clear the cache and release the HTTP client, if one was opened."""
        self.clear()
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None


# =============================================================================
# Global Cache Singleton
# =============================================================================

# None until init_data_store() or the first get_data_store() call
_store: Optional[DataFileCache] = None


async def init_data_store(settings: Optional[Settings] = None) -> DataFileCache:
    """Create the process-wide cache (idempotent)."""
    global _store

    if _store is None:
        _store = DataFileCache(settings)
        source = _store.settings.data_base_url or _store.settings.data_root
        logger.info(f"Data store initialised (source: {source})")

    return _store


def get_data_store() -> DataFileCache:
    """Return the process-wide cache, creating it lazily if needed."""
    global _store

    if _store is None:
        _store = DataFileCache()

    return _store


async def close_data_store() -> None:
    """Close and reset the process-wide cache (idempotent)."""
    global _store

    if _store is not None:
        await _store.close()
        _store = None
