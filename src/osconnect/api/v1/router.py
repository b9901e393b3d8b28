"""API v1 router: aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from osconnect.api.v1.endpoints.connectors import router as connectors_router
from osconnect.api.v1.endpoints.health import router as health_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(connectors_router, tags=["Connectors"])
