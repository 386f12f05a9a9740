"""Liveness and uptime endpoints — unversioned, no dependencies."""

import time

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from usage_tracker.presentation.api.forms import text_response

router = APIRouter(tags=["Health"])


def format_uptime(seconds: float) -> str:
    """Render a duration as ``{days}d{hours:02}h{minutes:02}m{seconds:02}s``."""
    total = int(seconds)
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{days}d{hours:02d}h{minutes:02d}m{secs:02d}s"


@router.get("/", response_class=PlainTextResponse)
async def liveness() -> PlainTextResponse:
    return text_response("API OK")


@router.get("/uptime", response_class=PlainTextResponse)
async def uptime(request: Request) -> PlainTextResponse:
    """Time elapsed since the application was created."""
    elapsed = time.monotonic() - request.app.state.started_at
    return text_response(f"API uptime: {format_uptime(elapsed)}")
