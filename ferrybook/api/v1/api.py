"""
Main API Router
Aggregates all API endpoints for v1
"""

from fastapi import APIRouter
from ferrybook.api.v1.endpoints import (
    schedules,
    bookings,
    payment,
    admin,
    health
)

api_router = APIRouter()

# Include all routers
api_router.include_router(schedules.router, prefix="/schedules", tags=["schedules"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(payment.router, prefix="/payments", tags=["payments"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
