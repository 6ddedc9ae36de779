"""
Routers of the application. `api_router` is mounted under API_PREFIX, the
others at the root.
"""
from fastapi import APIRouter

from server.app.api.endpoints import (
    admin_api,
    contact_api,
    downloads_api,
    health,
    orders_api,
)

api_router = APIRouter()
api_router.include_router(orders_api.router, tags=["orders"])
api_router.include_router(downloads_api.router, tags=["downloads"])
api_router.include_router(admin_api.router, tags=["admin"])

root_router = APIRouter()
root_router.include_router(health.router, prefix="/health", tags=["health"])
root_router.include_router(contact_api.router, tags=["contact"])
