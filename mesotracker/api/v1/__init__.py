"""API v1 router aggregation."""

from fastapi import APIRouter

from mesotracker.api.v1.endpoints import cycles, health, plans, records, sessions

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(plans.router, prefix="/plans", tags=["plans"])
api_router.include_router(cycles.router, prefix="/cycles", tags=["cycles"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
api_router.include_router(records.router, prefix="/records", tags=["records"])
