from fastapi import APIRouter

from posyandu_portal.api.v1.endpoints.admin import router as admin_router
from posyandu_portal.api.v1.endpoints.cache import router as cache_router
from posyandu_portal.api.v1.endpoints.consultations import (
    router as consultations_router,
)
from posyandu_portal.api.v1.endpoints.journals import router as journals_router
from posyandu_portal.api.v1.endpoints.kader import router as kader_router

router = APIRouter(prefix="/api/v1")
router.include_router(kader_router)
router.include_router(journals_router)
router.include_router(consultations_router)
router.include_router(admin_router)
router.include_router(cache_router)
