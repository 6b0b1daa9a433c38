"""Ready-made unit that tracks its own edits against a saved baseline."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING

from .types import RegistryEntry, SubmitResult, ValidationResult

if TYPE_CHECKING:
    from .ports import UnitHost
    from .types import UnitId

log = getLogger(__name__)

type Payload = dict[str, object]
type PayloadValidator = Callable[[Mapping[str, object]], Awaitable[ValidationResult]]
type PayloadSubmitter = Callable[[UnitId, Mapping[str, object]], Awaitable[SubmitResult]]


async def accept_all(data: Mapping[str, object]) -> ValidationResult:  # noqa: ARG001
    return ValidationResult.ok()


class TrackedUnit:
    """A unit whose payload is compared with the last saved baseline.

    Every edit recomputes dirtiness and reports it to the attached host. A
    successful submit adopts the submitted payload as the new baseline.
    """

    def __init__(
        self,
        unit_id: UnitId,
        display_name: str,
        *,
        submitter: PayloadSubmitter,
        validator: PayloadValidator = accept_all,
        initial: Mapping[str, object] | None = None,
    ) -> None:
        self.unit_id = unit_id
        self.display_name = display_name
        self._submitter = submitter
        self._validator = validator
        self._baseline: Payload = dict(initial or {})
        self._data: Payload = dict(self._baseline)
        self._host: UnitHost | None = None

    @property
    def data(self) -> Mapping[str, object]:
        return MappingProxyType(self._data)

    @property
    def baseline(self) -> Mapping[str, object]:
        return MappingProxyType(self._baseline)

    @property
    def is_dirty(self) -> bool:
        return self._data != self._baseline

    @property
    def host(self) -> UnitHost | None:
        return self._host

    def update(self, **changes: object) -> None:
        self._data = {**self._data, **changes}
        self._report()

    def replace(self, data: Mapping[str, object]) -> None:
        self._data = dict(data)
        self._report()

    def revert(self) -> None:
        self._data = dict(self._baseline)
        self._report()

    async def validate(self) -> ValidationResult:
        return await self._validator(dict(self._data))

    async def submit(self) -> SubmitResult:
        payload = dict(self._data)
        result = await self._submitter(self.unit_id, payload)
        if result.success:
            self._baseline = payload
        return result

    def registry_entry(self) -> RegistryEntry:
        return RegistryEntry.from_unit(self.unit_id, self.display_name, self)

    def attach(self, host: UnitHost) -> None:
        """Register with ``host`` and report the current edit state."""

        if self._host is not None and self._host is not host:
            self.detach()
        self._host = host
        host.register(self.registry_entry())
        self._report()

    def detach(self) -> None:
        """Unregister and withdraw any pending dirty mark."""

        host = self._host
        if host is None:
            return
        self._host = None
        host.unregister(self.unit_id)
        host.report_dirty(self.unit_id, False)
        log.debug("Unit %s detached", self.unit_id)

    def _report(self) -> None:
        if self._host is not None:
            self._host.report_dirty(self.unit_id, self.is_dirty)

    def __repr__(self) -> str:
        return f"TrackedUnit({self.unit_id!r}, dirty={self.is_dirty})"
