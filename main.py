"""
Devconnect API — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.middleware import register_middleware
from auth.jwt import TokenService
from auth.routes import router as auth_router
from config.settings import Settings, get_settings
from database.session import build_engine, build_session_factory, create_tables
from profiles.routes import router as profile_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("httpcore", "httpx", "urllib3", "sqlalchemy.engine", "aiosqlite", "asyncio"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Creating database tables…")
    await create_tables(app.state.engine)
    logger.info("Application ready to accept requests.")
    yield
    await app.state.engine.dispose()
    logger.info("Database engine disposed.")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    # Missing JWT_SECRET fails here, before the server accepts anything.
    settings = settings or get_settings()

    app = FastAPI(
        title="Devconnect API",
        version="1.0.0",
        description="Developer profiles with token authentication.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.tokens = TokenService(settings.jwt_secret, settings.jwt_expiry_seconds)
    app.state.engine = build_engine(settings.database_url)
    app.state.session_factory = build_session_factory(app.state.engine)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router, prefix="/api")
    app.include_router(profile_router, prefix="/api/profile")

    return app


if __name__ == "__main__":
    _settings = get_settings()
    configure_logging(_settings)
    uvicorn.run(
        create_app(_settings),
        host=_settings.host,
        port=_settings.port,
        log_level="debug" if _settings.debug else "info",
    )
