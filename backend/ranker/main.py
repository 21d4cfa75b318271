"""
Ticker Ranker Backend - FastAPI Application

Main entry point for the ranking API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ranker.core.config import settings
from ranker.api.v1 import router as api_v1_router
from ranker.schemas.ranking import CacheStats
from ranker.services.cache import (
    ResultCache,
    close_redis,
    get_result_cache,
    init_redis,
    set_result_cache,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Default comparator: {settings.default_comparator}")

    # Initialize Redis-backed result cache
    redis_client = await init_redis(settings.redis_url)
    if redis_client:
        logger.info("Redis cache connected")
    else:
        logger.info("Redis unavailable - using in-memory cache")

    set_result_cache(
        ResultCache(
            redis_client=redis_client,
            capacity=settings.cache_capacity,
            degraded_cooldown=settings.cache_degraded_cooldown_seconds,
        )
    )

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_redis(redis_client)


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Ticker Ranker API

    ## Architecture
    - **Result Cache**: In-memory LRU in front of Redis
    - **Comparators**: Deterministic scores or LLM verdicts per ticker pair
    - **Sorting Engine**: Async merge sort driven by the comparator
    - **Tradable Filter**: Top-ranked tickers whose market is open
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "cache": CacheStats(**get_result_cache().stats()),
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Ticker Ranker API",
        "docs": "/docs",
        "health": "/health",
    }
