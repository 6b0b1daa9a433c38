"""Translate phase outcomes into presentable error records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, assert_never

from .errors import ErrorKind, FormSubmissionError, FormValidationError, NetworkError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .errors import SaveError
    from .types import FieldError, FormValidationSummary, SubmitResult, UnitId

NETWORK_ERROR_MESSAGE = "Network error occurred. Please check your connection."
NON_RETRYABLE_STATUS_CODES = frozenset({400, 401, 403, 404, 422})


def to_validation_error(summary: FormValidationSummary) -> FormValidationError:
    return FormValidationError(
        unit_id=summary.unit_id,
        display_name=summary.display_name,
        message=f"{summary.display_name} has validation errors",
        field_errors=list(summary.errors),
    )


def to_submission_error(result: SubmitResult, display_name: str) -> FormSubmissionError:
    return FormSubmissionError(
        unit_id=result.unit_id,
        display_name=display_name,
        message=result.error or "Submission failed",
        status_code=result.status_code,
        retryable=_status_is_retryable(result.status_code),
    )


def create_network_error(error: BaseException) -> NetworkError:
    return NetworkError(message=NETWORK_ERROR_MESSAGE, original_error=error, retryable=True)


def format_field_errors(errors: Iterable[FieldError]) -> str:
    return "; ".join(f"{error.field}: {error.message}" for error in errors)


@dataclass(slots=True)
class UnitErrorGroup:
    """Everything that went wrong for one unit, for summary display."""

    validation: list[FieldError] = field(default_factory=list)
    submission: str | None = None


def group_errors_by_unit(
    validation_errors: Iterable[FormValidationError],
    submission_errors: Iterable[FormSubmissionError],
) -> dict[UnitId, UnitErrorGroup]:
    grouped: dict[UnitId, UnitErrorGroup] = {}
    for error in validation_errors:
        grouped.setdefault(error.unit_id, UnitErrorGroup()).validation = list(error.field_errors)
    for error in submission_errors:
        grouped.setdefault(error.unit_id, UnitErrorGroup()).submission = error.message
    return grouped


def is_retryable_error(error: FormSubmissionError | NetworkError) -> bool:
    if error.kind is ErrorKind.NETWORK:
        return error.retryable
    if error.status_code is not None:
        return _status_is_retryable(error.status_code)
    return error.retryable


def error_message(error: SaveError) -> str:
    """User-facing one-liner for any save error."""

    match error:
        case FormValidationError():
            return f"Please fix the errors in {error.display_name}"
        case FormSubmissionError():
            return f"Failed to save {error.display_name}: {error.message}"
        case NetworkError():
            return error.message
        case _:
            assert_never(error)


def _status_is_retryable(status_code: int | None) -> bool:
    return status_code not in NON_RETRYABLE_STATUS_CODES
