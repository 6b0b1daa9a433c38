from __future__ import annotations

import asyncio

from multisave.domain.dirty_set import DirtySet
from multisave.domain.registry import UnitRegistry
from multisave.domain.save_pipeline import (
    SubmissionPhaseRunner,
    ValidationPhaseRunner,
    drain_stragglers,
    resolve_dirty_entries,
    settle_all,
)
from multisave.domain.types import UNIT_LEVEL_FIELD
from tests.helpers.units import FakeUnit


def test_resolve_dirty_entries_follows_dirty_order() -> None:
    dirty = DirtySet(["b", "ghost", "a"])
    registry = UnitRegistry()
    registry.register(FakeUnit("a").entry())
    registry.register(FakeUnit("b").entry())

    resolved = resolve_dirty_entries(dirty, registry)

    assert list(resolved) == ["b", "a"]


def test_settle_all_with_no_calls_returns_empty() -> None:
    result = asyncio.run(
        settle_all({}, expect=int, on_error=lambda _uid, _exc: -1, on_timeout=lambda _uid: -2)
    )

    assert result == []


def test_settle_all_orders_results_by_input() -> None:
    async def slow() -> int:
        await asyncio.sleep(0.02)
        return 1

    async def fast() -> int:
        return 2

    result = asyncio.run(
        settle_all(
            {"slow": slow, "fast": fast},
            expect=int,
            on_error=lambda _uid, _exc: -1,
            on_timeout=lambda _uid: -2,
        )
    )

    assert result == [("slow", 1), ("fast", 2)]


def test_deadline_turns_pending_validation_into_failure() -> None:
    fast = FakeUnit("fast")
    stuck = FakeUnit("stuck", validate_delay=0.5)
    dirty = DirtySet(["fast", "stuck"])
    registry = UnitRegistry()
    registry.register(fast.entry())
    registry.register(stuck.entry())

    result = asyncio.run(ValidationPhaseRunner(timeout_seconds=0.05).run(dirty, registry))

    assert result.all_valid is False
    assert [summary.unit_id for summary in result.summaries] == ["stuck"]
    assert result.summaries[0].errors[0].field == UNIT_LEVEL_FIELD
    assert result.summaries[0].errors[0].message == "Validation timed out"


def test_deadline_does_not_cancel_pending_submit() -> None:
    slow = FakeUnit("slow", submit_delay=0.05)
    dirty = DirtySet(["slow"])
    registry = UnitRegistry()
    registry.register(slow.entry())

    async def scenario() -> tuple[list[str], bool]:
        summary = await SubmissionPhaseRunner(timeout_seconds=0.01).run(dirty, registry)
        await asyncio.sleep(0.1)
        return summary.failed_unit_ids, slow.submit_finished

    failed, finished = asyncio.run(scenario())

    assert failed == ["slow"]
    assert finished is True
    assert dirty.ids() == ("slow",)


def test_deadline_keeps_results_of_settled_units() -> None:
    done = FakeUnit("done")
    dirty = DirtySet(["done"])
    registry = UnitRegistry()
    registry.register(done.entry())

    summary = asyncio.run(SubmissionPhaseRunner(timeout_seconds=1.0).run(dirty, registry))

    assert summary.successful_units == ["done"]
    assert dirty.ids() == ()


def test_drain_stragglers_waits_for_abandoned_submits() -> None:
    slow = FakeUnit("slow", submit_delay=0.05)
    dirty = DirtySet(["slow"])
    registry = UnitRegistry()
    registry.register(slow.entry())

    async def scenario() -> tuple[int, bool, int]:
        await SubmissionPhaseRunner(timeout_seconds=0.01).run(dirty, registry)
        drained = await drain_stragglers()
        return drained, slow.submit_finished, await drain_stragglers()

    drained, finished, drained_again = asyncio.run(scenario())

    assert drained == 1
    assert finished is True
    assert drained_again == 0


def test_unit_raising_cancelled_error_is_contained() -> None:
    async def aborted() -> int:
        raise asyncio.CancelledError

    async def fine() -> int:
        return 1

    result = asyncio.run(
        settle_all(
            {"aborted": aborted, "fine": fine},
            expect=int,
            on_error=lambda _uid, exc: -1 if isinstance(exc, asyncio.CancelledError) else -9,
            on_timeout=lambda _uid: -2,
        )
    )

    assert result == [("aborted", -1), ("fine", 1)]


def test_cancelling_the_caller_still_cancels_the_phase() -> None:
    stuck = FakeUnit("stuck", submit_delay=1.0)
    dirty = DirtySet(["stuck"])
    registry = UnitRegistry()
    registry.register(stuck.entry())

    async def scenario() -> bool:
        task = asyncio.create_task(SubmissionPhaseRunner().run(dirty, registry))
        await asyncio.sleep(0.01)
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            return True
        return False

    assert asyncio.run(scenario()) is True
    assert stuck.submit_finished is False
