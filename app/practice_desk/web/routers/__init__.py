from fastapi import APIRouter

from practice_desk.web.routers.bulk_upload import router as bulk_upload_router
from practice_desk.web.routers.dashboard import router as dashboard_router
from practice_desk.web.routers.health import router as health_router
from practice_desk.web.routers.invoices import router as invoices_router
from practice_desk.web.routers.leaves import router as leaves_router
from practice_desk.web.routers.lists import router as lists_router


router = APIRouter()
router.include_router(health_router)
router.include_router(lists_router)
router.include_router(bulk_upload_router)
router.include_router(invoices_router)
router.include_router(leaves_router)
router.include_router(dashboard_router)
