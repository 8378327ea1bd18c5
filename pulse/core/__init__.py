"""
Core infrastructure package.

Provides:
- Configuration management via pydantic-settings
- The process-wide JSON history file cache
- FastAPI dependency injection utilities

Usage:
    from pulse.core import get_settings, init_data_store, DataStoreDep
"""

# =============================================================================
# Re-exports from pulse.core.config
# =============================================================================
from pulse.core.config import Settings, get_settings

# =============================================================================
# Re-exports from pulse.core.data_store
# =============================================================================
from pulse.core.data_store import (
    DataFileCache,
    init_data_store,
    get_data_store,
    close_data_store,
)

# =============================================================================
# Re-exports from pulse.core.dependencies
# =============================================================================
from pulse.core.dependencies import (
    get_settings_dependency,
    get_data_store_dependency,
    SettingsDep,
    DataStoreDep,
)

__all__ = [
    # Configuration (config.py)
    'Settings',
    'get_settings',
    # File cache lifecycle (data_store.py)
    'DataFileCache',
    'init_data_store',
    'get_data_store',
    'close_data_store',
    # FastAPI dependency injection (dependencies.py)
    'get_settings_dependency',
    'get_data_store_dependency',
    'SettingsDep',
    'DataStoreDep',
]
