"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints of the occupancy service
"""

from fastapi import APIRouter

from hostel_occupancy.api.v1.endpoints import fees, health, hostels, logs, students

router = APIRouter(
    responses={
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
        503: {"description": "Data Source Unavailable"},
    }
)

router.include_router(health.router)
router.include_router(hostels.router)
router.include_router(students.router)
router.include_router(fees.router)
router.include_router(logs.router)

__all__ = ["router"]
