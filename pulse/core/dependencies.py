"""
FastAPI dependency injection for the n8n Pulse backend.

Routers receive configuration and the shared file cache through these
dependencies rather than importing the singletons directly, so tests can
swap them with app.dependency_overrides:

    app.dependency_overrides[get_data_store_dependency] = lambda: test_cache

Usage:
    @router.get("/metrics/{metric_id}/data")
    async def get_metric_data(metric_id: str, store: DataStoreDep):
        return await load_metric_data(metric_id, cache=store)
"""

from typing import Annotated

from fastapi import Depends

from pulse.core.config import Settings, get_settings
from pulse.core.data_store import DataFileCache, get_data_store


# =============================================================================
# Settings Dependency
# =============================================================================

def get_settings_dependency() -> Settings:
    """Return the cached Settings instance."""
    return get_settings()


# =============================================================================
# Data Store Dependency
# =============================================================================

def get_data_store_dependency() -> DataFileCache:
    """Return the process-wide DataFileCache."""
    return get_data_store()


# =============================================================================
# Type Aliases for Dependency Injection
# =============================================================================

# Usage: async def endpoint(settings: SettingsDep)
SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]

# Usage: async def endpoint(store: DataStoreDep)
DataStoreDep = Annotated[DataFileCache, Depends(get_data_store_dependency)]
