"""
API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from pizza_service.api.v1.endpoints import auth, franchise, health, order

api_router = APIRouter()

# Register, login, logout, account updates
api_router.include_router(auth.router)

# Menu + diner orders
api_router.include_router(order.router)

# Franchises + stores
api_router.include_router(franchise.router)

# Liveness
api_router.include_router(health.router)
