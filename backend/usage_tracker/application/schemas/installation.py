"""Pydantic DTOs for installation registration."""

from pydantic import BaseModel, ConfigDict, Field, Json, field_validator


class InstallationCreate(BaseModel):
    """Form fields accepted by ``POST /1/installation/new``.

    ``dosvox_info`` and ``machine_info`` arrive as JSON-encoded strings and
    must decode to ``null`` or an object mapping strings to strings. A
    ``null`` value inside the object is stored as an empty string.
    """

    machine_id: str = Field(..., min_length=1, examples=["00:26:cc:18:be:14"])
    xmppvox_version: str = Field(..., min_length=1, examples=["1.1"])
    dosvox_info: Json[dict[str, str | None] | None] = Field(
        ..., examples=['{"root": "C:\\\\winvox", "version": "4.0 BETA"}'],
    )
    machine_info: Json[dict[str, str | None] | None] = Field(
        ..., examples=['{"system": "Windows", "release": "XP"}'],
    )

    model_config = ConfigDict(extra="forbid")

    @field_validator("dosvox_info", "machine_info")
    @classmethod
    def _null_values_to_empty(
        cls, value: dict[str, str | None] | None
    ) -> dict[str, str] | None:
        if value is None:
            return None
        return {key: "" if item is None else item for key, item in value.items()}
