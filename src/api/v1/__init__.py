"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.me import router as me_router
from api.v1.routes.pages import router as pages_router

router = APIRouter()
router.include_router(pages_router)
router.include_router(me_router)
