"""Fan-out/fan-in over per-unit capability calls."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from multisave.domain.dirty_set import DirtySet
    from multisave.domain.registry import UnitRegistry
    from multisave.domain.types import RegistryEntry, UnitId

log = getLogger(__name__)

# Calls abandoned at a deadline keep running; hold a reference until they finish.
_stragglers: set[asyncio.Future[object]] = set()


def resolve_dirty_entries(
    dirty_set: DirtySet, registry: UnitRegistry
) -> dict[UnitId, RegistryEntry]:
    """Pair every dirty id with its registration, in dirty-set order.

    Dirty ids without a registration are left out of the phase and stay dirty.
    """

    snapshot = registry.snapshot()
    resolved: dict[UnitId, RegistryEntry] = {}
    unregistered: list[UnitId] = []
    for unit_id in dirty_set.ids():
        entry = snapshot.get(unit_id)
        if entry is None:
            unregistered.append(unit_id)
            continue
        resolved[unit_id] = entry
    if unregistered:
        log.warning("Skipping dirty units that are not registered: %s", ", ".join(unregistered))
    return resolved


async def settle_all[T](
    calls: Mapping[UnitId, Callable[[], Awaitable[T]]],
    *,
    expect: type[T],
    on_error: Callable[[UnitId, BaseException], T],
    on_timeout: Callable[[UnitId], T],
    timeout: float | None = None,
) -> list[tuple[UnitId, T]]:
    """Run every call concurrently and wait until each one has settled.

    A call that raises (including a ``CancelledError`` not aimed at this task) or
    resolves to something other than ``expect`` is turned into ``on_error``'s value
    for that unit alone. With ``timeout`` set, calls still pending at the deadline
    get ``on_timeout``'s value but are not cancelled; see :func:`drain_stragglers`.
    Results follow the order of ``calls``, never completion order.
    """

    if not calls:
        return []

    async def guarded(unit_id: UnitId, call: Callable[[], Awaitable[T]]) -> T:
        try:
            outcome = await call()
            if not isinstance(outcome, expect):
                raise TypeError(  # noqa: TRY301
                    f"expected {expect.__name__}, got {type(outcome).__name__}"
                )
        except asyncio.CancelledError as exc:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            log.warning("Unit %s was cancelled during %s", unit_id, expect.__name__)
            return on_error(unit_id, exc)
        except Exception as exc:  # noqa: BLE001
            log.warning("Unit %s raised during %s: %s", unit_id, expect.__name__, exc)
            return on_error(unit_id, exc)
        return outcome

    if timeout is None:
        outcomes = await asyncio.gather(*(guarded(uid, call) for uid, call in calls.items()))
        return list(zip(calls, outcomes, strict=True))

    tasks = {uid: asyncio.ensure_future(guarded(uid, call)) for uid, call in calls.items()}
    _done, pending = await asyncio.wait(tasks.values(), timeout=timeout)

    settled: list[tuple[UnitId, T]] = []
    for unit_id, task in tasks.items():
        if task in pending:
            log.warning("Unit %s did not settle within %.2fs", unit_id, timeout)
            _keep_until_settled(unit_id, task)
            settled.append((unit_id, on_timeout(unit_id)))
        else:
            settled.append((unit_id, task.result()))
    return settled


async def drain_stragglers() -> int:
    """Wait for every call abandoned at a deadline on the running loop.

    Call this before closing resources those calls still use, e.g. an HTTP client,
    and before the loop shuts down. Returns how many calls were awaited.
    """

    loop = asyncio.get_running_loop()
    pending = [task for task in _stragglers if task.get_loop() is loop and not task.done()]
    if not pending:
        return 0
    log.info("Waiting for %d units that missed their deadline", len(pending))
    await asyncio.gather(*pending, return_exceptions=True)
    return len(pending)


def _keep_until_settled(unit_id: UnitId, task: asyncio.Future[object]) -> None:
    def _report(finished: asyncio.Future[object]) -> None:
        _stragglers.discard(finished)
        if finished.cancelled():
            log.warning("Unit %s was cancelled after missing its deadline", unit_id)
            return
        log.info("Unit %s settled after its deadline: %r", unit_id, finished.result())

    _stragglers.add(task)
    task.add_done_callback(_report)
