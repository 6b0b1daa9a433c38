"""Error and notification records surfaced to the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from .types import FieldError, UnitId


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class ErrorKind(StrEnum):
    VALIDATION = "validation"
    SUBMISSION = "submission"
    NETWORK = "network"


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(slots=True, kw_only=True)
class FormValidationError:
    """Field-level failures of one unit; recoverable by editing the unit."""

    unit_id: UnitId
    display_name: str
    message: str
    field_errors: list[FieldError] = field(default_factory=list)
    timestamp: datetime = field(default_factory=_utcnow)
    kind: Literal[ErrorKind.VALIDATION] = ErrorKind.VALIDATION


@dataclass(slots=True, kw_only=True)
class FormSubmissionError:
    """Persistence of one unit was rejected by the server or transport."""

    unit_id: UnitId
    display_name: str
    message: str
    status_code: int | None = None
    retryable: bool = True
    timestamp: datetime = field(default_factory=_utcnow)
    kind: Literal[ErrorKind.SUBMISSION] = ErrorKind.SUBMISSION


@dataclass(slots=True, kw_only=True)
class NetworkError:
    """Cycle-level fault not attributable to a single unit."""

    message: str
    original_error: BaseException | None = None
    retryable: bool = True
    timestamp: datetime = field(default_factory=_utcnow)
    kind: Literal[ErrorKind.NETWORK] = ErrorKind.NETWORK


type SaveError = FormValidationError | FormSubmissionError | NetworkError


@dataclass(slots=True, kw_only=True)
class Notification:
    """Dismissible message; ``auto_dismiss`` is a lifetime in seconds, 0 or None keeps it."""

    id: str
    severity: Severity
    title: str
    message: str
    unit_id: UnitId | None = None
    dismissible: bool = True
    auto_dismiss: float | None = None
