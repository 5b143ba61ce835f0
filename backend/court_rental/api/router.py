"""
Central API routers.

`api_router` serves the booking site and admin under /api/v1;
`functions_router` serves the notification handlers at /functions.
"""

from fastapi import APIRouter
from court_rental.api.routes import admin, bookings, courts, notifications, promos

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(courts.router)
api_router.include_router(promos.router)
api_router.include_router(bookings.router)
api_router.include_router(admin.router)

functions_router = notifications.router
