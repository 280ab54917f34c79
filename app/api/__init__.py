# API routes
from fastapi import APIRouter
from app.api.clients import router as clients_router
from app.api.screenings import router as screenings_router
from app.api.referrals import router as referrals_router
from app.api.resources import router as resources_router
from app.api.ops import router as ops_router
from app.api.calendar import router as calendar_router
from app.api.events import router as events_router
from app.api.public import router as public_router

# Combine all routers
router = APIRouter()
router.include_router(clients_router)
router.include_router(screenings_router)
router.include_router(referrals_router)
router.include_router(resources_router)
router.include_router(ops_router)
router.include_router(calendar_router)
router.include_router(events_router)
router.include_router(public_router)

__all__ = ["router"]
