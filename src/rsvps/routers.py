from fastapi import APIRouter

from .features.admin.router import router as admin_router
from .features.check_capacity.router import router as check_capacity_router
from .features.create_rsvp.router import router as create_rsvp_router
from .features.payment_webhook.router import router as payment_webhook_router

router = APIRouter()

router.include_router(check_capacity_router)
router.include_router(create_rsvp_router)
router.include_router(payment_webhook_router)

admin = APIRouter()

admin.include_router(admin_router)
