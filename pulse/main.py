"""
FastAPI application entry point for the n8n Pulse analytics API.

Configures logging and CORS, manages the shared data file cache across the
application lifespan and mounts the API routers.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pulse import __version__
from pulse.api import api_router
from pulse.core.config import get_settings
from pulse.core.data_store import close_data_store, init_data_store

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for startup and shutdown.

    On startup the process-wide data file cache is created; on shutdown it is
    cleared and its HTTP client (if any) closed.
    """
    logger.info("n8n Pulse API starting")
    await init_data_store()

    yield

    logger.info("n8n Pulse API shutting down")
    try:
        await close_data_store()
    except Exception as e:
        logger.error(f"Error closing data store: {e}")


app = FastAPI(
    title="n8n Pulse API",
    version=__version__,
    description=(
        "Analytics backend for the n8n Pulse dashboard. "
        "Provides metric series, milestone predictions, categorical "
        "distributions, rankings and correlations, and playground URL state."
    ),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring probes."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """API name, version and documentation links."""
    return {
        "name": "n8n Pulse API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pulse.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
