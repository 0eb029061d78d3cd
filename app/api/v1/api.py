# Router aggregator
from fastapi import APIRouter
from app.api.v1.endpoints.auth import auth_router
from app.api.v1.endpoints import users_router
from app.api.v1.endpoints import events_router
from app.api.v1.endpoints import projects_router
from app.api.v1.endpoints import health_router


api_router = APIRouter()

api_router.include_router(auth_router.router)
api_router.include_router(users_router.router)
api_router.include_router(events_router.router)
api_router.include_router(projects_router.router)
api_router.include_router(health_router.router)
