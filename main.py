import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notifyhub.config import get_settings
from notifyhub.infrastructure.database import engine, initialize_database
from notifyhub.infrastructure.notifications import NotificationConnectionManager
from notifyhub.interfaces.api.routes import register_routes
from notifyhub.interfaces.api.routes_helpers import register_exception_handlers
from notifyhub.services import build_dispatcher, build_provider_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables on startup and release the engine on shutdown."""

    initialize_database()
    yield
    engine.dispose()


def create_app() -> FastAPI:
    """Build the FastAPI application together with its notification providers."""

    settings = get_settings()
    app = FastAPI(title="NotifyHub", lifespan=lifespan)

    app.state.notification_manager = NotificationConnectionManager()
    app.state.provider_registry = build_provider_registry(
        settings, app.state.notification_manager
    )
    app.state.notification_dispatcher = build_dispatcher(settings, app.state.provider_registry)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_routes(app)
    return app


app = create_app()
