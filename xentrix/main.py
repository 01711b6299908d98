"""
FastAPI application entry point for the Xentrix KPI API.

Configures logging and CORS, registers the KPI router and exposes health
endpoints. The engine is stateless, so there is nothing to open or close in
the lifespan beyond logging.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from xentrix import __version__
from xentrix.api.kpi import router as kpi_router
from xentrix.core.config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and shutdown."""
    logger.info("Xentrix KPI API starting")
    yield
    logger.info("Xentrix KPI API shutting down")


settings = get_settings()

app = FastAPI(
    title=settings.api_title,
    version=__version__,
    description=(
        "KPI engine for call-center activity records: normalized metrics, "
        "per-agent stats, quantile rankings and rule-based insights."
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

app.include_router(kpi_router)


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring and load balancer probes."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """Root endpoint providing API information."""
    return {
        "name": settings.api_title,
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "xentrix.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
