from fastapi import APIRouter

from devgate.api.v1.endpoints import devices, health, routing


api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(devices.router)
api_router.include_router(routing.router)
