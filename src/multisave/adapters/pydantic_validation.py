"""Build unit validators from pydantic models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError

from multisave.domain.types import UNIT_LEVEL_FIELD, FieldError, ValidationResult

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pydantic_core import ErrorDetails

    from multisave.domain.units import PayloadValidator


def pydantic_validator(model: type[BaseModel]) -> PayloadValidator:
    """Return an async validator that checks a payload against ``model``."""

    async def validate(data: Mapping[str, object]) -> ValidationResult:
        try:
            model.model_validate(dict(data))
        except ValidationError as exc:
            return ValidationResult.failed(field_errors_from(exc))
        return ValidationResult.ok()

    return validate


def field_errors_from(exc: ValidationError) -> list[FieldError]:
    return [_to_field_error(detail) for detail in exc.errors()]


def _to_field_error(detail: ErrorDetails) -> FieldError:
    path = ".".join(str(part) for part in detail["loc"]) or UNIT_LEVEL_FIELD
    message = detail["msg"]
    # custom validators raise ValueError; pydantic prefixes its message
    if detail["type"] == "value_error":
        original = detail.get("ctx", {}).get("error")
        if original is not None:
            message = str(original)
    return FieldError(field=path, message=message)
