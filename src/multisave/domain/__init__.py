"""Adapter-free core of multisave: unit state, save pipeline and error reporting."""

from __future__ import annotations

from .dirty_set import DirtySet
from .error_store import ErrorStore
from .errors import (
    ErrorKind,
    FormSubmissionError,
    FormValidationError,
    NetworkError,
    Notification,
    Severity,
)
from .ports import DirtyReporter, SaveableUnit, Submittable, UnitHost, Validatable
from .registry import UnitRegistry
from .save_pipeline import SaveCoordinator, SubmissionPhaseRunner, ValidationPhaseRunner
from .types import (
    UNIT_LEVEL_FIELD,
    FieldError,
    FormValidationSummary,
    RegistryEntry,
    SaveState,
    SubmissionStatus,
    SubmissionSummary,
    SubmitResult,
    UnitId,
    ValidationResult,
)
from .units import TrackedUnit, accept_all

__all__ = [
    "UNIT_LEVEL_FIELD",
    "DirtyReporter",
    "DirtySet",
    "ErrorKind",
    "ErrorStore",
    "FieldError",
    "FormSubmissionError",
    "FormValidationError",
    "FormValidationSummary",
    "NetworkError",
    "Notification",
    "RegistryEntry",
    "SaveCoordinator",
    "SaveState",
    "SaveableUnit",
    "Severity",
    "SubmissionPhaseRunner",
    "SubmissionStatus",
    "SubmissionSummary",
    "SubmitResult",
    "Submittable",
    "TrackedUnit",
    "UnitHost",
    "UnitId",
    "UnitRegistry",
    "Validatable",
    "ValidationPhaseRunner",
    "ValidationResult",
    "accept_all",
]
