"""
FastAPI application factory.

``create_app`` wires settings, the session manager, error handling and the
routers. Tests pass their own session manager; a running server lets the
lifespan build one from the settings.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..database import SessionManager, create_engine_from_settings
from ..models import Base
from ..utils.config import (
    EnvironmentConfig,
    LoggingConfigurator,
    SchedulingSettings,
)
from .deps import get_session_manager
from .errors import register_exception_handlers, register_request_logging
from .routes import appointments_router, clinics_router, vets_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[SchedulingSettings] = None,
    session_manager: Optional[SessionManager] = None,
) -> FastAPI:
    """
    Build the scheduling API.

    Args:
        settings: Runtime settings, read from the environment when omitted
        session_manager: Session manager to use instead of creating one
            from ``settings.database_url`` at startup
    """
    settings = settings or SchedulingSettings.from_environment()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_sessions = app.state.session_manager is None
        if owns_sessions:
            engine = create_engine_from_settings(settings)
            app.state.session_manager = SessionManager(engine)
            db_type = "SQLite" if settings.is_sqlite else "PostgreSQL"
            logger.info(f"Using {db_type} database")

        if settings.create_tables_on_startup:
            await app.state.session_manager.initialize_database(Base.metadata)

        logger.info("Scheduling API startup complete")
        yield

        if owns_sessions:
            await app.state.session_manager.close_all_sessions()
        logger.info("Scheduling API shut down")

    app = FastAPI(
        title="Vet Scheduling API",
        version=__version__,
        description="Appointment scheduling for veterinary clinics",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_manager = session_manager

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_request_logging(app)
    register_exception_handlers(app)

    app.include_router(appointments_router)
    app.include_router(vets_router)
    app.include_router(clinics_router)

    @app.get("/health", tags=["health"])
    async def health_check(
        session_manager: SessionManager = Depends(get_session_manager),
    ):
        """Report service and database health."""
        database = await session_manager.health_check()
        return {
            "status": database["status"],
            "timestamp": time.time(),
            "version": __version__,
            "database": database,
        }

    return app


def main() -> None:
    """Run the API with uvicorn using settings from the environment."""
    import uvicorn

    settings = SchedulingSettings.from_environment()
    LoggingConfigurator.configure_structured_logging(settings.log_level.upper())
    uvicorn.run(
        create_app(settings),
        host=EnvironmentConfig.get_str("API_HOST", "0.0.0.0"),
        port=EnvironmentConfig.get_int("API_PORT", 8000),
        log_level=settings.log_level.lower(),
    )
