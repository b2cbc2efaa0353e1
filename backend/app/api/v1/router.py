"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter

from backend.app.api.v1.endpoints import (
    agencies, audit, auth, drivers, hotels, maintenance, trips, users, vehicles
)

router = APIRouter()

router.include_router(auth.router)
router.include_router(trips.router)
router.include_router(drivers.router)
router.include_router(vehicles.router)
router.include_router(agencies.router)
router.include_router(hotels.router)
router.include_router(maintenance.router)
router.include_router(users.router)
router.include_router(audit.router)
