"""Form parsing and plain-text responses shared by the API endpoints.

The API speaks ``application/x-www-form-urlencoded`` in and one token per
line out. Every endpoint accepts exactly its schema's fields: a missing,
empty or unknown field rejects the whole request before any store call.
"""

from typing import TypeVar

from fastapi import HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ValidationError
from starlette.datastructures import FormData

from usage_tracker.domain.entities import RequestSnapshot

ModelT = TypeVar("ModelT", bound=BaseModel)

# Error types that mean "the field set is wrong" rather than "a value is malformed"
_FIELD_SET_ERRORS = frozenset({"missing", "extra_forbidden", "string_too_short"})


async def read_form(request: Request, schema: type[ModelT]) -> ModelT:
    """Validate the POSTed form against ``schema`` or raise a 400."""
    form = await request.form()
    data = _first_values(form)
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_describe_errors(schema, data, exc),
        ) from exc


def _first_values(form: FormData) -> dict[str, str]:
    # Uploaded files are not valid field values; treat them as empty
    values: dict[str, str] = {}
    for key in form.keys():
        value = form.getlist(key)[0]
        values[key] = value if isinstance(value, str) else ""
    return values


def _describe_errors(schema: type[BaseModel], data: dict[str, str], exc: ValidationError) -> str:
    errors = exc.errors()
    for error in errors:
        field = error["loc"][0] if error["loc"] else None
        if error["type"] in _FIELD_SET_ERRORS or data.get(field) == "":
            return f"Retry with POST parameters: {', '.join(schema.model_fields)}"

    first = errors[0]
    if first["type"] == "value_error":
        return str(first["ctx"]["error"])
    return f"Invalid JSON for {first['loc'][0]}"


def text_response(*lines: str) -> PlainTextResponse:
    """One line per token, newline-terminated."""
    return PlainTextResponse("".join(f"{line}\n" for line in lines))


async def snapshot_request(request: Request) -> RequestSnapshot:
    """Capture the parts of the request worth keeping alongside a session."""
    form = await request.form()
    headers: dict[str, list[str]] = {}
    for name, value in request.headers.items():
        headers.setdefault(name, []).append(value)

    client = request.client
    return RequestSnapshot(
        method=request.method,
        url=str(request.url),
        headers=headers,
        host=request.headers.get("host", ""),
        form={
            key: [v for v in form.getlist(key) if isinstance(v, str)]
            for key in form.keys()
        },
        remote_addr=f"{client.host}:{client.port}" if client else "",
    )
