from __future__ import annotations

import asyncio

from multisave.domain.dirty_set import DirtySet
from multisave.domain.registry import UnitRegistry
from multisave.domain.save_pipeline import SubmissionPhaseRunner
from multisave.domain.types import RegistryEntry, SubmissionStatus, SubmitResult
from tests.helpers.units import FakeUnit


def _setup(*units: FakeUnit) -> tuple[DirtySet, UnitRegistry]:
    dirty = DirtySet()
    registry = UnitRegistry()
    for unit in units:
        registry.register(unit.entry())
        dirty.mark_dirty(unit.unit_id)
    return dirty, registry


def test_all_successful_units_become_clean() -> None:
    dirty, registry = _setup(FakeUnit("a"), FakeUnit("b"))

    summary = asyncio.run(SubmissionPhaseRunner().run(dirty, registry))

    assert summary.status is SubmissionStatus.SUCCESS
    assert summary.successful_units == ["a", "b"]
    assert summary.failed_units == []
    assert dirty.ids() == ()


def test_partial_failure_keeps_only_failed_units_dirty() -> None:
    dirty, registry = _setup(FakeUnit("a"), FakeUnit("b", submit_error="Server error"))

    summary = asyncio.run(SubmissionPhaseRunner().run(dirty, registry))

    assert summary.status is SubmissionStatus.ERROR
    assert summary.successful_units == ["a"]
    assert [result.unit_id for result in summary.failed_units] == ["b"]
    assert summary.failed_units[0].error == "Server error"
    assert dirty.ids() == ("b",)


def test_raising_submit_is_converted_for_that_unit_only() -> None:
    ok = FakeUnit("ok", submit_delay=0.01)
    broken = FakeUnit("broken", submit_raises=ConnectionError("connection reset"))
    dirty, registry = _setup(ok, broken)

    summary = asyncio.run(SubmissionPhaseRunner().run(dirty, registry))

    assert summary.successful_units == ["ok"]
    failed = summary.failed_units[0]
    assert failed.success is False
    assert failed.unit_id == "broken"
    assert failed.error == "connection reset"
    assert dirty.ids() == ("broken",)


def test_exception_without_message_gets_generic_error() -> None:
    dirty, registry = _setup(FakeUnit("a", submit_raises=RuntimeError()))

    summary = asyncio.run(SubmissionPhaseRunner().run(dirty, registry))

    assert summary.failed_units[0].error == "Unknown error"


def test_unregistered_dirty_units_are_neither_submitted_nor_cleaned() -> None:
    dirty, registry = _setup(FakeUnit("a"))
    dirty.mark_dirty("ghost")

    summary = asyncio.run(SubmissionPhaseRunner().run(dirty, registry))

    assert summary.status is SubmissionStatus.SUCCESS
    assert summary.successful_units == ["a"]
    assert dirty.ids() == ("ghost",)


def test_result_is_keyed_by_registered_id() -> None:
    dirty = DirtySet(["real"])
    registry = UnitRegistry()

    async def validate_ok() -> object:
        raise AssertionError("not used")

    async def submit_mislabelled() -> SubmitResult:
        return SubmitResult(success=False, unit_id="other", error="nope")

    registry.register(RegistryEntry("real", "Real", validate_ok, submit_mislabelled))  # type: ignore[arg-type]

    summary = asyncio.run(SubmissionPhaseRunner().run(dirty, registry))

    assert summary.failed_unit_ids == ["real"]
    assert dirty.ids() == ("real",)


def test_retry_only_resubmits_failed_units() -> None:
    ok = FakeUnit("ok")
    flaky = FakeUnit("flaky", submit_error="Server error")
    dirty, registry = _setup(ok, flaky)
    runner = SubmissionPhaseRunner()

    asyncio.run(runner.run(dirty, registry))
    flaky.submit_error = None
    summary = asyncio.run(runner.run(dirty, registry))

    assert ok.submit_calls == 1
    assert flaky.submit_calls == 2
    assert summary.successful_units == ["flaky"]
    assert dirty.ids() == ()
