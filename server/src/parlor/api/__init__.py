"""API routes."""

from fastapi import APIRouter

from .admin import router as admin_router
from .health import router as health_router
from .rooms import router as rooms_router
from .sessions import router as sessions_router

router = APIRouter()
router.include_router(health_router)
router.include_router(sessions_router)
router.include_router(rooms_router)
router.include_router(admin_router)
