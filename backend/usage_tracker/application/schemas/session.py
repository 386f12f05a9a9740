"""Pydantic DTOs for the session lifecycle endpoints."""

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class SessionCreate(BaseModel):
    """Form fields accepted by ``POST /1/session/new``."""

    jid: str = Field(..., min_length=1, examples=["testuser@server.org"])
    machine_id: str = Field(..., min_length=1, examples=["00:26:cc:18:be:14"])
    xmppvox_version: str = Field(..., min_length=1, examples=["1.0"])

    model_config = ConfigDict(extra="forbid")


class SessionReference(BaseModel):
    """Form fields accepted by ``POST /1/session/close`` and ``/1/session/ping``.

    The machine_id doubles as an ownership token: only the machine that
    opened a session may close or ping it.
    """

    session_id: str = Field(..., min_length=1, examples=["5f1d7c3e9b1e8a3d4c2b1a09"])
    machine_id: str = Field(..., min_length=1, examples=["00:26:cc:18:be:14"])

    model_config = ConfigDict(extra="forbid")

    @field_validator("session_id")
    @classmethod
    def _check_object_id(cls, value: str) -> str:
        if not ObjectId.is_valid(value):
            raise ValueError(f"Invalid session id {value}")
        return value
