"""Capability contracts a unit must satisfy to take part in a save cycle."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .types import RegistryEntry, SubmitResult, UnitId, ValidationResult


@runtime_checkable
class Validatable(Protocol):
    """Anything that can check its own pending edits."""

    async def validate(self) -> ValidationResult: ...


@runtime_checkable
class Submittable(Protocol):
    """Anything that can persist its own pending edits."""

    async def submit(self) -> SubmitResult: ...


@runtime_checkable
class SaveableUnit(Validatable, Submittable, Protocol):
    """Marker protocol for units offering both capabilities."""


@runtime_checkable
class DirtyReporter(Protocol):
    """Sink a unit reports its edit state to."""

    def report_dirty(self, unit_id: UnitId, is_dirty: bool) -> None: ...


@runtime_checkable
class UnitHost(DirtyReporter, Protocol):
    """Coordinator-side contract used by a unit's lifecycle hooks."""

    def register(self, entry: RegistryEntry) -> None: ...

    def unregister(self, unit_id: UnitId) -> None: ...


__all__ = ["DirtyReporter", "SaveableUnit", "Submittable", "UnitHost", "Validatable"]
