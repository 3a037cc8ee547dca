"""API v1 routes."""

from fastapi import APIRouter

from pycomments.api.v1 import health, nonces

router = APIRouter()

router.include_router(health.router, tags=["health"])
router.include_router(nonces.router, prefix="/nonces", tags=["nonces"])
