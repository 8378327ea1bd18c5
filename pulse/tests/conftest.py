"""
Pytest configuration and shared fixtures for the n8n Pulse tests.

Provides:
- Custom markers (slow, integration)
- Sample history/snapshot payloads shaped like the files the fetch scripts
  publish under public/data/
- A data root in tmp_path populated with those files
- Settings and a DataFileCache bound to that data root
- A FastAPI TestClient whose data store dependency uses the test cache

Dependencies:
- pytest
- pytest-asyncio (async tests are marked with @pytest.mark.asyncio)
- httpx (required by fastapi.testclient)
"""

import json
from pathlib import Path
from typing import Any, Dict, Generator, List

import pytest

from pulse.core.config import Settings, get_settings
from pulse.core.data_store import DataFileCache


# =============================================================================
# PYTEST HOOKS
# =============================================================================

def pytest_configure(config) -> None:
    """
    Register custom markers.

    - slow: long-running tests (deselect with -m "not slow")
    - integration: tests that exercise several layers together (API + files)
    """
    config.addinivalue_line(
        'markers',
        'slow: marks tests as slow (deselect with -m "not slow")'
    )
    config.addinivalue_line(
        'markers',
        'integration: marks tests exercising the API against sample files'
    )


# =============================================================================
# SAMPLE PAYLOADS
# =============================================================================

def _monthly(values: List[Any], start_year: int = 2024) -> List[str]:
    return [f"{start_year + i // 12}-{i % 12 + 1:02d}" for i in range(len(values))]


@pytest.fixture
def github_history() -> Dict[str, Any]:
    """
    GitHub history with daily/weekly/monthly arrays.

    Monthly stars start with a sentinel zero (not yet measured) and grow
    by 1000/month from 100000. Weekly dates use YYYY-Www.
    """
    stars = [0, 100000, 101000, 102000, 103000, 104000, 105000]
    forks = [0, 30000, 30500, 31000, 31500, 32000, 32500]
    monthly = [
        {"date": d, "stars": s, "forks": f, "watchers": 700, "openIssues": 900}
        for d, s, f in zip(_monthly(stars), stars, forks)
    ]
    weekly = [
        {"date": f"2024-W{w:02d}", "stars": 100000 + 250 * w, "forks": 30000 + 100 * w}
        for w in range(1, 9)
    ]
    daily = [
        {"date": f"2024-03-{d:02d}", "stars": 101000 + 30 * d, "forks": 31000 + 10 * d}
        for d in range(1, 11)
    ]
    return {"lastUpdated": "2024-07-01T00:00:00Z", "daily": daily, "weekly": weekly, "monthly": monthly}


@pytest.fixture
def discord_history() -> Dict[str, Any]:
    """Discord daily history; members are two orders of magnitude below stars."""
    daily = [
        {"date": f"2024-03-{d:02d}", "members": 1000 + 5 * d, "online": 200 + d}
        for d in range(1, 11)
    ]
    return {"daily": daily, "weekly": [], "monthly": []}


@pytest.fixture
def templates_data() -> Dict[str, Any]:
    """Snapshot written by the template fetch script."""
    return {
        "lastUpdated": "2024-07-01",
        "complexity": {
            # Pre-binned: 10 templates total; expanded values
            # [1,1,2,2,2,2,3,3,3,10] -> median index 5 -> 2
            "distribution": [
                {"nodeCount": 1, "label": "1 node", "count": 2},
                {"nodeCount": 2, "label": "2 nodes", "count": 4},
                {"nodeCount": 3, "label": "3 nodes", "count": 3},
                {"nodeCount": 10, "label": "10+ nodes", "count": 1},
            ],
        },
        "timeline": {
            "monthly": [
                {"month": "2024-01", "count": 10, "cumulative": 10},
                {"month": "2024-02", "count": 15, "cumulative": 25},
                {"month": "2024-03", "count": 0, "cumulative": 25},
                {"month": "2024-04", "count": 20, "cumulative": 45},
            ],
        },
        "creators": {
            "top50": [
                {"username": "alice", "name": "Alice", "verified": True, "templateCount": 40, "totalViews": 9000},
                {"username": "bob", "name": "Bob", "verified": False, "templateCount": 20, "totalViews": 4000},
                {"username": "carol", "name": "Carol", "verified": True, "templateCount": 10, "totalViews": 2100},
                {"username": "dave", "name": "", "verified": False, "templateCount": 5, "totalViews": 1000},
                {"username": "erin", "name": "Erin", "verified": False, "templateCount": "n/a", "totalViews": 500},
            ],
        },
    }


@pytest.fixture
def nodes_data() -> Dict[str, Any]:
    """Snapshot written by the node usage fetch script."""
    all_nodes = [
        {"type": "n8n-nodes-base.httpRequest", "displayName": "HTTP Request", "category": "Core", "count": 500, "percentage": 50.0},
        {"type": "n8n-nodes-base.set", "displayName": "Edit Fields", "category": "Core", "count": 300, "percentage": 30.0},
        {"type": "n8n-nodes-base.slack", "displayName": "Slack", "category": "Communication", "count": 120, "percentage": 12.0},
        {"type": "n8n-nodes-base.gmail", "displayName": "Gmail", "category": "Communication", "count": 80, "percentage": 8.0},
        {"type": "n8n-nodes-base.openAi", "displayName": "OpenAI", "category": "AI", "count": 200, "percentage": 20.0},
    ]
    by_category: Dict[str, List[Dict[str, Any]]] = {}
    for node in all_nodes:
        by_category.setdefault(node["category"], []).append(node)
    return {"lastUpdated": "2024-07-02", "nodes": {"all": all_nodes, "byCategory": by_category}}


@pytest.fixture
def community_nodes_data() -> Dict[str, Any]:
    """Snapshot of community packages with weekly/monthly downloads."""
    return {
        "lastUpdated": "2024-07-03",
        "packages": [
            {"name": "n8n-nodes-alpha", "downloadsWeekly": 100, "downloadsMonthly": 400, "score": 0.9, "category": "AI"},
            {"name": "n8n-nodes-beta", "downloadsWeekly": 200, "downloadsMonthly": 800, "score": 0.8, "category": "Data"},
            {"name": "n8n-nodes-gamma", "downloadsWeekly": 300, "downloadsMonthly": 1200, "score": 0.7, "category": "AI"},
            {"name": "n8n-nodes-delta", "downloadsWeekly": None, "downloadsMonthly": 50, "score": 0.1, "category": "Data"},
        ],
    }


@pytest.fixture
def data_root(
    tmp_path: Path,
    github_history: Dict[str, Any],
    discord_history: Dict[str, Any],
    templates_data: Dict[str, Any],
    nodes_data: Dict[str, Any],
    community_nodes_data: Dict[str, Any],
) -> Path:
    """
    Directory laid out like public/ with the sample files under data/.

    Only a subset of registered files exist; loaders must treat the missing
    ones (e.g. community-history.json) as load failures.
    """
    files = {
        "data/github-history.json": github_history,
        "data/history/discord.json": discord_history,
        "data/all-templates-data.json": templates_data,
        "data/all-nodes-data.json": nodes_data,
        "data/community-nodes.json": community_nodes_data,
    }
    for relative, payload in files.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding='utf-8')
    (tmp_path / "data" / "history" / "broken.json").write_text("{not json", encoding='utf-8')
    return tmp_path


@pytest.fixture
def test_settings(data_root: Path) -> Settings:
    """Settings pointing at the sample data root, with no remote base URL."""
    return Settings(data_root=str(data_root), data_base_url=None)


@pytest.fixture
def cache(test_settings: Settings) -> DataFileCache:
    """A fresh DataFileCache reading the sample data root."""
    return DataFileCache(test_settings)


@pytest.fixture
def patched_settings(test_settings: Settings, monkeypatch: pytest.MonkeyPatch) -> Generator[Settings, None, None]:
    """
    Route get_settings() to the test settings for code that reads it directly.

    The lru_cache is cleared before and after so no other test sees them.
    """
    get_settings.cache_clear()
    monkeypatch.setenv('DATA_ROOT', test_settings.data_root)
    monkeypatch.delenv('DATA_BASE_URL', raising=False)
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def client(cache: DataFileCache, patched_settings: Settings) -> Generator:
    """
    FastAPI TestClient with the data store dependency bound to the test cache.

    Entering the client runs the application lifespan.
    """
    from fastapi.testclient import TestClient

    from pulse.core.dependencies import get_data_store_dependency, get_settings_dependency
    from pulse.main import app

    app.dependency_overrides[get_data_store_dependency] = lambda: cache
    app.dependency_overrides[get_settings_dependency] = lambda: patched_settings
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
