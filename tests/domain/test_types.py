from __future__ import annotations

import pytest

from multisave.domain.ports import SaveableUnit
from multisave.domain.types import (
    DEFAULT_SUBMISSION_ERROR,
    FieldError,
    SubmissionStatus,
    SubmissionSummary,
    SubmitResult,
    ValidationResult,
)
from tests.helpers.units import FakeUnit


def test_valid_result_rejects_errors() -> None:
    with pytest.raises(ValueError, match="cannot carry"):
        ValidationResult(valid=True, errors=[FieldError("name", "bad")])


def test_invalid_result_requires_errors() -> None:
    with pytest.raises(ValueError, match="at least one"):
        ValidationResult(valid=False)


def test_failed_submit_result_gets_default_message() -> None:
    result = SubmitResult(success=False, unit_id="a")

    assert result.error == DEFAULT_SUBMISSION_ERROR


def test_successful_submit_result_drops_error() -> None:
    result = SubmitResult(success=True, unit_id="a", error="ignored")

    assert result.error is None


def test_fake_unit_satisfies_capability_protocol() -> None:
    assert isinstance(FakeUnit("a"), SaveableUnit)


def test_summary_lists_failed_ids() -> None:
    summary = SubmissionSummary(
        status=SubmissionStatus.ERROR,
        successful_units=["a"],
        failed_units=[SubmitResult(success=False, unit_id="b", error="boom")],
    )

    assert summary.failed_unit_ids == ["b"]
