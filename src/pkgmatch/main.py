"""FastAPI application factory and lifespan management."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pkgmatch.config import settings
from pkgmatch.db.engine import create_db_engine, create_session_factory
from pkgmatch.logging_config import configure_logging

# Configure logging at import time
_json_logs = os.environ.get("PKGMATCH_LOCAL_MODE", "0") != "1"
configure_logging(log_level=settings.log_level, json_output=_json_logs)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown resources."""
    db_url = settings.effective_database_url
    engine = create_db_engine(db_url)

    # Auto-create tables for SQLite (local dev, schema is owned elsewhere)
    if "sqlite" in db_url:
        from pkgmatch.db.base import Base
        import pkgmatch.db.models  # noqa: F401 - register all ORM models

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("SQLite tables created (local mode)")

    app.state.db_engine = engine
    app.state.db_session_factory = create_session_factory(engine)

    logger.info("pkgmatch API started (db=%s)", "sqlite" if "sqlite" in db_url else "postgresql")
    yield

    await engine.dispose()
    logger.info("pkgmatch API shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="pkgmatch API",
        version="1.0.0",
        description="Tells release upload clients which packages already have stored artifacts.",
        lifespan=lifespan,
    )

    from pkgmatch.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(TraceIdMiddleware)

    from pkgmatch.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    from pkgmatch.api.router import api_router
    app.include_router(api_router)

    return app


app = create_app()
