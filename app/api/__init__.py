"""
API routers del servicio agrifusion-api.

Este módulo contiene todos los routers HTTP organizados por responsabilidad.
"""
from app.api.consultant import router as consultant_router
from app.api.farmers import router as farmers_router
from app.api.health import router as health_router
from app.api.notifications import router as notifications_router

__all__ = [
    "consultant_router",
    "farmers_router",
    "health_router",
    "notifications_router",
]
