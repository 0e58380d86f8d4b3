from .auth import auth_router
from .service_requests import requests_router
from .admin import admin_router
from .technicians import technicians_router
from .reviews import reviews_router
from .parts import parts_router
from .realtime import realtime_router

routers = [
    auth_router,
    requests_router,
    admin_router,
    technicians_router,
    reviews_router,
    parts_router,
    realtime_router
]

__all__ = ["routers"]
