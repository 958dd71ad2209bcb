from fastapi import APIRouter

from app.api.routes.auth import router as auth_router
from app.api.routes.stores import router as stores_router
from app.api.routes.ratings import router as ratings_router
from app.api.routes.admin import router as admin_router
from app.api.routes.health import router as health_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(stores_router)
api_router.include_router(ratings_router)
api_router.include_router(admin_router)
api_router.include_router(health_router)
