# Routers package
from . import auth_router
from . import user_router
from . import admin_router
from . import webhook_router

__all__ = [
    "auth_router",
    "user_router",
    "admin_router",
    "webhook_router",
]
