"""
Analytics endpoints - aggregated statistics for residents.
"""

import asyncio

from fastapi import APIRouter

from app.services.analytics_service import get_analytics_service

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/residents")
async def resident_analytics():
    """
    Issue statistics grouped by street/road and by category.
    """
    loop = asyncio.get_event_loop()
    data = await loop.run_in_executor(None, get_analytics_service().get_resident_analytics)
    return {"success": True, "data": data}
