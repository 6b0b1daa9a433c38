"""Save pipeline for coordinated multi-unit persistence.

A save cycle runs two fan-out phases over the dirty, registered units. The
validation phase gates the submission phase: nothing is persisted unless every
unit passes. The submission phase tolerates partial failure and leaves only the
failed units dirty.
"""

from __future__ import annotations

from .coordinator import SaveCoordinator
from .fanout import drain_stragglers, resolve_dirty_entries, settle_all
from .submission import SubmissionPhaseRunner
from .validation import ValidationPhaseResult, ValidationPhaseRunner

__all__ = [
    "SaveCoordinator",
    "SubmissionPhaseRunner",
    "ValidationPhaseResult",
    "ValidationPhaseRunner",
    "drain_stragglers",
    "resolve_dirty_entries",
    "settle_all",
]
