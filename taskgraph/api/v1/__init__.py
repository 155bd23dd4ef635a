"""API v1 routing configuration.

This module defines all v1 API routes.
"""

from fastapi import APIRouter

from taskgraph.api.v1 import rules, schedules

router = APIRouter()

# Domain routers
router.include_router(schedules.router, prefix="/schedules", tags=["Schedules"])
router.include_router(rules.router, prefix="/rules", tags=["Rules"])


@router.get("/status", tags=["Status"])
async def api_status() -> dict[str, str]:
    """API v1 status check."""
    return {"status": "ok", "version": "v1"}
