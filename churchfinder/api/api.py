from fastapi import APIRouter
from churchfinder.api.routes import auth, churches, health, users


api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(churches.router, prefix="/churches", tags=["churches"])
