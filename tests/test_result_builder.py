from __future__ import annotations

import pytest
from pydantic import ValidationError

from todokit.core.validation.result_builder import ValidationResultBuilder
from todokit.core.validation.schemas import FixRecord, TaskOutcome


def _fix(task_id: str, field: str = "priority") -> FixRecord:
    return FixRecord(id=task_id, field=field, old="BAD", new="P2")


def test_empty_builder_reports_valid_with_absent_fields() -> None:
    report = ValidationResultBuilder().build()
    assert report.valid is True
    assert report.errors is None
    assert report.fixes is None
    assert report.fixes_applied is None
    assert report.to_dict() == {"valid": True}


def test_errors_make_report_invalid_and_keep_order() -> None:
    builder = ValidationResultBuilder()
    builder.add_error("first")
    builder.add_error("second")
    report = builder.build()
    assert report.valid is False
    assert report.errors == ("first", "second")


def test_fixes_are_flattened_and_counter_incremented() -> None:
    builder = ValidationResultBuilder()
    builder.add_fixes([_fix("T-1"), _fix("T-1", "owner")])
    builder.add_fixes([_fix("T-2")])
    builder.increment_fixes_applied()
    report = builder.build()
    assert report.valid is True
    assert [(fix.id, fix.field) for fix in report.fixes] == [("T-1", "priority"), ("T-1", "owner"), ("T-2", "priority")]
    assert report.fixes_applied == 1


def test_add_outcome_merges_one_record() -> None:
    builder = ValidationResultBuilder()
    builder.add_outcome(TaskOutcome(index=0, task_id="T-1", persisted=True, fixes=[_fix("T-1")]))
    builder.add_outcome(TaskOutcome(index=1, task_id="", errors=["Task[1] has no id; cannot auto-fix"]))
    builder.add_outcome(TaskOutcome(index=2, task_id="T-3", excluded=True))
    report = builder.build()
    assert report.fixes_applied == 1
    assert len(report.fixes) == 1
    assert report.errors == ("Task[1] has no id; cannot auto-fix",)


def test_built_report_is_an_immutable_snapshot() -> None:
    builder = ValidationResultBuilder()
    builder.add_error("boom")
    report = builder.build()
    builder.add_error("later")

    assert report.errors == ("boom",)
    with pytest.raises(ValidationError):
        report.valid = True


def test_report_to_dict_serializes_fix_values() -> None:
    builder = ValidationResultBuilder()
    builder.add_fixes([FixRecord(id="T-1", field="validations", old=None, new=[])])
    payload = builder.build().to_dict()
    # a missing old value is omitted rather than serialized as null
    assert payload == {"valid": True, "fixes": [{"id": "T-1", "field": "validations", "new": []}]}
