"""FastAPI application factory and lifespan."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mesotracker.api.v1 import api_router
from mesotracker.core.config import get_settings
from mesotracker.core.logging_config import configure_logging
from mesotracker.db.session import engine
from mesotracker.services.training_session import SessionRegistry

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: session registry; shutdown: abandon open sessions, close the pool."""
    # Schema is managed by Alembic (alembic upgrade head)
    app.state.sessions = SessionRegistry()
    logger.info("%s starting (%s)", settings.app_name, settings.environment)
    yield
    await app.state.sessions.close_all()
    await engine.dispose()


def create_application() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # CORS: allow localhost in dev; in production use CORS_ORIGINS env (comma-separated)
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root():
        return {"status": "ok", "message": settings.app_name}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
