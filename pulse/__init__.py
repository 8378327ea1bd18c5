"""
n8n Pulse Analytics Package.

FastAPI service layer for the n8n Pulse community dashboard.
Reads the JSON history files written by the fetch scripts and serves
chart-ready time series, distributions, rankings, correlations and
milestone forecasts.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration, file cache, and dependencies
    - models: Pydantic schemas and enums
    - registry: Declarative catalog of metrics and categorical datasets
    - services: Loaders, transforms, statistics, predictions, URL state
"""

__version__ = "1.0.0"
