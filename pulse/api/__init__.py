"""
API package: FastAPI routers for the n8n Pulse backend.

- metrics: metric listing, raw series and milestone predictions
- series: multi-metric chart payloads
- sources: timeseries and categorical sources, categorical data
- playground: URL state decode/encode and one-call view resolution
"""

from fastapi import APIRouter

from pulse.api.metrics import router as metrics_router
from pulse.api.series import router as series_router
from pulse.api.sources import router as sources_router
from pulse.api.playground import router as playground_router

api_router = APIRouter()

api_router.include_router(metrics_router, prefix="/metrics", tags=["metrics"])
api_router.include_router(series_router, prefix="/series", tags=["series"])
api_router.include_router(sources_router, tags=["sources"])  # serves /sources and /categorical
api_router.include_router(playground_router, prefix="/playground", tags=["playground"])

__all__ = [
    "api_router",
    "metrics_router",
    "series_router",
    "sources_router",
    "playground_router",
]
