"""Top-level API router — health endpoints plus versioned sub-routers."""

from fastapi import APIRouter

from usage_tracker.presentation.api.health import router as health_router
from usage_tracker.presentation.api.v1.router import router as v1_router

router = APIRouter()
router.include_router(health_router)
router.include_router(v1_router)
