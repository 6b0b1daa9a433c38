"""Live directory of units that can be validated and submitted."""

from __future__ import annotations

from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from .types import RegistryEntry, UnitId

log = getLogger(__name__)


class UnitRegistry:
    """Map a unit id to its capabilities and display name.

    Registration is last-writer-wins. The registry never touches the dirty set:
    a unit may be unregistered while still dirty, and the phase runners skip ids
    they cannot resolve here.
    """

    def __init__(self) -> None:
        self._entries: dict[UnitId, RegistryEntry] = {}

    def register(self, entry: RegistryEntry) -> None:
        replaced = entry.unit_id in self._entries
        self._entries = {**self._entries, entry.unit_id: entry}
        if replaced:
            log.debug("Replaced registration for unit %s", entry.unit_id)
        else:
            log.debug("Registered unit %s (%s)", entry.unit_id, entry.display_name)

    def unregister(self, unit_id: UnitId) -> None:
        if unit_id not in self._entries:
            return
        self._entries = {key: value for key, value in self._entries.items() if key != unit_id}
        log.debug("Unregistered unit %s", unit_id)

    def get(self, unit_id: UnitId) -> RegistryEntry | None:
        return self._entries.get(unit_id)

    def display_name_for(self, unit_id: UnitId) -> str:
        entry = self._entries.get(unit_id)
        return entry.display_name if entry is not None else unit_id

    def snapshot(self) -> Mapping[UnitId, RegistryEntry]:
        """Return a read-only view that later registrations cannot change."""

        return MappingProxyType(self._entries)

    def clear(self) -> None:
        self._entries = {}

    def __contains__(self, unit_id: object) -> bool:
        return unit_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[UnitId]:
        return iter(tuple(self._entries))
