"""Tracking of units with unsaved edits."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from .types import UnitId

log = getLogger(__name__)


class DirtySet:
    """Ids of units that currently have unsaved edits.

    Holds ids only, never unit data, and is the single source of truth for
    "needs saving". Every mutation swaps in a new immutable snapshot, so a phase
    runner that captured :meth:`ids` before fanning out is unaffected by edits
    reported while it waits.
    """

    def __init__(self, initial: Iterable[UnitId] = ()) -> None:
        # dict keys keep insertion order for display purposes
        self._ids: dict[UnitId, None] = dict.fromkeys(initial)

    def mark_dirty(self, unit_id: UnitId) -> None:
        if unit_id in self._ids:
            return
        self._ids = {**self._ids, unit_id: None}
        log.debug("Unit %s marked dirty", unit_id)

    def mark_clean(self, unit_id: UnitId) -> None:
        if unit_id not in self._ids:
            return
        self._ids = {key: None for key in self._ids if key != unit_id}
        log.debug("Unit %s marked clean", unit_id)

    def mark_many_clean(self, unit_ids: Iterable[UnitId]) -> None:
        cleaned = set(unit_ids)
        if not cleaned.intersection(self._ids):
            return
        self._ids = {key: None for key in self._ids if key not in cleaned}

    def report(self, unit_id: UnitId, is_dirty: bool) -> None:
        if is_dirty:
            self.mark_dirty(unit_id)
        else:
            self.mark_clean(unit_id)

    def reset_all(self) -> None:
        self._ids = {}

    def is_dirty(self) -> bool:
        return bool(self._ids)

    def ids(self) -> tuple[UnitId, ...]:
        return tuple(self._ids)

    def __contains__(self, unit_id: object) -> bool:
        return unit_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[UnitId]:
        return iter(self.ids())

    def __repr__(self) -> str:
        return f"DirtySet({list(self._ids)!r})"
