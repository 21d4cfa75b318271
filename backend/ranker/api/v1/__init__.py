"""
API v1 Router

All ranking API endpoints.
"""

from fastapi import APIRouter

from ranker.api.v1.endpoints import rankings

router = APIRouter()

router.include_router(rankings.router, prefix="/rankings", tags=["Rankings"])
