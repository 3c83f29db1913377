"""Router aggregation."""

from fastapi import APIRouter

from app.api.routes.registration import router as registration_router
from app.api.routes.system import router as system_router
from app.api.routes.ui import router as ui_router
from app.api.routes.users import router as users_router

api_router = APIRouter()
api_router.include_router(system_router)
api_router.include_router(registration_router)
api_router.include_router(users_router)
api_router.include_router(ui_router)
