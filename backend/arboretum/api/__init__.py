"""API router aggregator."""
from fastapi import APIRouter

from arboretum.api.routes import admin, auth, trees, users

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(trees.router)
api_router.include_router(admin.router)

__all__ = ["api_router"]
