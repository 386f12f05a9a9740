"""FastAPI application factory and command-line entry point."""

import argparse
import logging
import sys
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from usage_tracker.config import DEFAULT_CONFIG_PATH, ConfigError, Settings, load_settings
from usage_tracker.infrastructure.database import MongoConnection
from usage_tracker.infrastructure.logging.log_config import setup_logging
from usage_tracker.presentation.api.errors import register_exception_handlers
from usage_tracker.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — connect to MongoDB, prepare indexes, close on shutdown."""
    settings: Settings = app.state.settings
    setup_logging(settings)

    # Fails startup within mongo.connect_timeout when the server is unreachable
    connection = MongoConnection(settings.mongo)
    try:
        await connection.connect()
        await connection.ensure_indexes()
    except Exception:
        await connection.close()
        raise
    app.state.mongo = connection
    logger.info("Serving at %s:%d", settings.http.host, settings.http.port)

    yield

    # Shutdown
    await connection.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = settings or Settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.started_at = time.monotonic()

    register_exception_handlers(app)
    app.include_router(api_router)

    return app


def main(argv: list[str] | None = None) -> int:
    import uvicorn

    parser = argparse.ArgumentParser(description="XMPPVOX usage tracking API server")
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="path to a configuration file in JSON format",
    )
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        logging.basicConfig(format="%(levelname)-8s %(name)s — %(message)s")
        logger.error("%s", exc)
        return 1

    uvicorn.run(create_app(settings), host=settings.http.host, port=settings.http.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
