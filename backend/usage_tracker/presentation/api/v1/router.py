"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from usage_tracker.presentation.api.v1.endpoints.installations import router as installations_router
from usage_tracker.presentation.api.v1.endpoints.sessions import router as sessions_router

router = APIRouter(prefix="/1")
router.include_router(installations_router)
router.include_router(sessions_router)
