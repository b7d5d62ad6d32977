from fastapi import APIRouter
from jingjai.api.v1.endpoints import (
    auth, health, users,
    clients, inventory, sales, bookings, resources
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])

# Resource endpoints
api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
api_router.include_router(sales.router, prefix="/sales", tags=["sales"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(resources.router, prefix="/resources", tags=["resources"])
