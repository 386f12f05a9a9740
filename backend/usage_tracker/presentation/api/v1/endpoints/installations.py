"""Installation tracking endpoint."""

from collections.abc import Callable

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse

from usage_tracker.application.schemas import InstallationCreate
from usage_tracker.application.services import InstallationService
from usage_tracker.domain.exceptions import DuplicateEntityError, StorageUnavailableError
from usage_tracker.infrastructure.dependencies import (
    get_installation_service,
    get_reconnect_trigger,
)
from usage_tracker.presentation.api.errors import storage_failure
from usage_tracker.presentation.api.forms import read_form, text_response

router = APIRouter(prefix="/installation", tags=["Installations"])


@router.post("/new", response_class=PlainTextResponse)
async def new_installation(
    request: Request,
    service: InstallationService = Depends(get_installation_service),
    reconnect: Callable[[], None] = Depends(get_reconnect_trigger),
) -> PlainTextResponse:
    """Register a new installation and echo its machine_id.

    A machine_id can only be registered once; the first registration wins.
    """
    data = await read_form(request, InstallationCreate)
    try:
        installation = await service.register_installation(data)
    except DuplicateEntityError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Installation already registered",
        )
    except StorageUnavailableError as e:
        raise storage_failure(e, reconnect, f"Failed to track install {data.machine_id}")
    return text_response(installation.machine_id)
