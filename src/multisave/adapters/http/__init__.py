"""HTTP transport for unit submission."""

from __future__ import annotations

from .client import HttpUnitSubmitter, SubmissionAPIError
from .schema import SubmissionResponse

__all__ = ["HttpUnitSubmitter", "SubmissionAPIError", "SubmissionResponse"]
