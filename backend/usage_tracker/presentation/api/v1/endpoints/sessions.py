"""Session lifecycle endpoints — open, close and ping."""

from collections.abc import Callable

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse

from usage_tracker.application.schemas import SessionCreate, SessionReference
from usage_tracker.application.services import SessionService
from usage_tracker.domain.exceptions import EntityNotFoundError, StorageUnavailableError
from usage_tracker.infrastructure.dependencies import get_reconnect_trigger, get_session_service
from usage_tracker.presentation.api.errors import storage_failure
from usage_tracker.presentation.api.forms import read_form, snapshot_request, text_response

router = APIRouter(prefix="/session", tags=["Sessions"])


def _not_found(session_id: str) -> HTTPException:
    # Unknown id, foreign owner and already-closed all get the same answer
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Session {session_id} does not exist or is already closed",
    )


@router.post("/new", response_class=PlainTextResponse)
async def new_session(
    request: Request,
    service: SessionService = Depends(get_session_service),
    reconnect: Callable[[], None] = Depends(get_reconnect_trigger),
) -> PlainTextResponse:
    """Open a session and return its id on the first line of the body."""
    data = await read_form(request, SessionCreate)
    snapshot = await snapshot_request(request)
    try:
        session = await service.open_session(data, snapshot)
    except StorageUnavailableError as e:
        raise storage_failure(e, reconnect, "Failed to create a new session")
    return text_response(session.id)


@router.post("/close", response_class=PlainTextResponse)
async def close_session(
    request: Request,
    service: SessionService = Depends(get_session_service),
    reconnect: Callable[[], None] = Depends(get_reconnect_trigger),
) -> PlainTextResponse:
    """Close an open session owned by the given machine_id."""
    data = await read_form(request, SessionReference)
    try:
        await service.close_session(data)
    except EntityNotFoundError:
        raise _not_found(data.session_id)
    except StorageUnavailableError as e:
        raise storage_failure(e, reconnect, f"Failed to close session {data.session_id}")
    return text_response(data.session_id)


@router.post("/ping", response_class=PlainTextResponse)
async def ping_session(
    request: Request,
    service: SessionService = Depends(get_session_service),
    reconnect: Callable[[], None] = Depends(get_reconnect_trigger),
) -> PlainTextResponse:
    """Record a keep-alive on an open session owned by the given machine_id."""
    data = await read_form(request, SessionReference)
    try:
        await service.ping_session(data)
    except EntityNotFoundError:
        raise _not_found(data.session_id)
    except StorageUnavailableError as e:
        raise storage_failure(e, reconnect, f"Failed to ping session {data.session_id}")
    return text_response(data.session_id)
