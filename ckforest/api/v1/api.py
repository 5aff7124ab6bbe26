from fastapi import APIRouter
from ckforest.api.v1.routes.public import router as public_router
from ckforest.api.v1.routes.bookings import router as bookings_router
from ckforest.api.v1.routes.admin import router as admin_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(public_router)
api_router.include_router(bookings_router)
api_router.include_router(admin_router)
