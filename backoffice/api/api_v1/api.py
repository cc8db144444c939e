from fastapi import APIRouter

from backoffice.api.api_v1.endpoints import auth, users, clients, visas, properties, health

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(visas.router, prefix="/visas", tags=["visas"])
api_router.include_router(properties.router, prefix="/properties", tags=["properties"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
