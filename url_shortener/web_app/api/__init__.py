"""REST API routers."""

from fastapi import APIRouter

from .routes import router as url_router
from .auth import router as auth_router
from .system import router as system_router

api_router = APIRouter()
api_router.include_router(auth_router, prefix="/v1/auth", tags=["1. Authentication"])
api_router.include_router(url_router, prefix="/v1/url", tags=["2. URL shortener"])
api_router.include_router(system_router)

__all__ = ["api_router"]
