"""Exception handlers — every error leaves the API as a plain-text line."""

import logging
from collections.abc import Callable

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from usage_tracker.domain.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)


def storage_failure(
    exc: StorageUnavailableError, reconnect: Callable[[], None], message: str
) -> HTTPException:
    """Log a storage failure, kick off a reconnect and build the 500 to raise.

    The reconnect runs in the background; the current request is not retried.
    """
    logger.error("%s: %s", message, exc, exc_info=exc.cause)
    reconnect()
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    return PlainTextResponse(f"{exc.detail}\n", status_code=exc.status_code, headers=exc.headers)


async def _storage_exception_handler(request: Request, exc: StorageUnavailableError) -> PlainTextResponse:
    # Failures outside an endpoint's own handling, e.g. during session checkout
    logger.error("Unhandled storage failure on %s: %s", request.url.path, exc)
    request.app.state.mongo.schedule_reconnect()
    return PlainTextResponse(
        "Storage unavailable\n", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(StorageUnavailableError, _storage_exception_handler)
