from fastapi import FastAPI

from .auth import router as auth_router
from .notification_templates import router as notification_templates_router
from .notifications import router as notifications_router
from .roles import router as roles_router
from .users import router as users_router


def register_routes(app: FastAPI) -> None:
    """Include every API router in ``app``."""

    app.include_router(auth_router)
    app.include_router(notifications_router)
    app.include_router(notification_templates_router)
    app.include_router(users_router)
    app.include_router(roles_router)
