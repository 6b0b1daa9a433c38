"""Pydantic models describing the submission API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class SubmissionBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SubmissionResponse(SubmissionBaseModel):
    success: bool
    id: str | None = None
    message: str | None = None
    error: str | None = None

    _normalize_text = field_validator("id", "message", "error", mode="before")(_blank_to_none)
