from __future__ import annotations

import asyncio
import io
import json
import logging

import pytest

from todokit.core.errors import SchemaLoadError
from todokit.core.logging.json_formatter import JSONFormatter
from todokit.core.validation import FixRecord, TaskValidationService, validate_and_fix_tasks

TODAY = "2024-01-01"


class RecordingStore:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []

    async def update_task_by_id(self, task_id: str, task: dict) -> bool:
        await asyncio.sleep(0)
        self.calls.append((task_id, dict(task)))
        return True


def _run(tasks, apply_fixes=False, **kwargs):
    return asyncio.run(validate_and_fix_tasks(tasks, apply_fixes, today=TODAY, **kwargs))


def test_scenario_a_fixes_in_memory_make_record_valid() -> None:
    task = {
        "id": "T-1",
        "priority": "BAD",
        "status": "open",
        "created": "2024-01-01",
        "updated": "2024-01-01",
        "owner": "john   doe",
        "validations": [],
    }
    store = RecordingStore()
    report = _run([task], apply_fixes=False, store=store)

    assert report.valid is True
    assert report.errors is None
    assert report.fixes_applied is None
    assert FixRecord(id="T-1", field="priority", old="BAD", new="P2") in report.fixes
    assert FixRecord(id="T-1", field="owner", old="john   doe", new="John Doe") in report.fixes
    assert len(report.fixes) == 2
    assert store.calls == []


@pytest.mark.parametrize("apply_fixes", [False, True])
def test_scenario_b_record_without_id(apply_fixes: bool) -> None:
    store = RecordingStore()
    report = _run([{"summary": "no id"}], apply_fixes=apply_fixes, store=store)

    assert report.valid is False
    assert len(report.errors) == 1
    assert "no id" in report.errors[0]
    assert report.fixes is None
    assert store.calls == []


def test_scenario_c_store_called_once_per_fixed_record() -> None:
    tasks = [
        {"id": "T-100", "summary": "missing fields"},
        {"id": "T-101", "summary": "bad dates", "created": "not-a-date", "updated": "also-bad"},
        {
            "id": "T-200",
            "summary": "ok",
            "priority": "P1",
            "status": "open",
            "created": "2020-01-01",
            "updated": "2020-01-01",
        },
    ]
    store = RecordingStore()
    report = _run(tasks, apply_fixes=True, store=store)

    assert report.valid is True
    assert report.fixes_applied == 2
    assert sorted(task_id for task_id, _ in store.calls) == ["T-100", "T-101"]
    written = dict(store.calls)
    assert written["T-101"]["created"] == TODAY
    assert written["T-101"]["updated"] == TODAY
    assert written["T-100"] == {
        "id": "T-100",
        "summary": "missing fields",
        "priority": "P2",
        "status": "open",
        "created": TODAY,
        "updated": TODAY,
        "validations": [],
    }
    assert {fix.id for fix in report.fixes} == {"T-100", "T-101"}


def test_already_valid_batch_round_trips_without_fields() -> None:
    task = {
        "id": "T-7",
        "priority": "P0",
        "status": "done",
        "created": "2021-02-03",
        "updated": "2021-02-04",
        "owner": "Grace Hopper",
        "validations": ["pytest"],
    }
    report = _run([task, dict(task, id="T-8")])
    assert report.to_dict() == {"valid": True}


def test_exclusion_takes_precedence_over_errors_and_fixes() -> None:
    tasks = [
        {"id": "LEGACY-1", "priority": "BAD"},
        {"summary": "legacy import without id", "owner": "nobody"},
        {"id": "T-1", "priority": "BAD"},
    ]
    store = RecordingStore()
    report = _run(tasks, apply_fixes=True, exclude_pattern="*legacy*", store=store)

    assert report.errors is None
    assert {fix.id for fix in report.fixes} == {"T-1"}
    assert [task_id for task_id, _ in store.calls] == ["T-1"]


def test_batch_report_groups_per_record_and_keeps_batch_order() -> None:
    tasks = [
        {"summary": "no id"},
        {"id": "T-2", "priority": "BAD", "summary": 5},
        {"id": "T-3", "status": "weird"},
    ]
    report = _run(tasks)

    assert report.valid is False
    assert report.errors[0] == "Task[0] has no id; cannot auto-fix"
    assert report.errors[1].startswith("Task[1] validation failed after fixes: /summary")
    ids = [fix.id for fix in report.fixes]
    assert ids == sorted(ids)
    assert ("T-3", "status") in {(fix.id, fix.field) for fix in report.fixes}


def test_input_records_are_not_mutated() -> None:
    task = {"id": "T-1", "priority": "BAD"}
    _run([task])
    assert task == {"id": "T-1", "priority": "BAD"}


def test_empty_batch_is_valid() -> None:
    assert _run([]).to_dict() == {"valid": True}


def test_missing_schema_propagates(tmp_path) -> None:
    with pytest.raises(SchemaLoadError):
        asyncio.run(validate_and_fix_tasks([{"id": "T-1"}], False, schema_path=tmp_path / "missing.json"))


def test_service_logs_run_summary_through_injected_logger() -> None:
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger = logging.getLogger("todokit.test.service")
    logger.handlers = [handler]
    logger.setLevel(logging.INFO)
    logger.propagate = False

    service = TaskValidationService(today=TODAY)
    asyncio.run(service.validate_and_fix_tasks([{"id": "T-1"}, {"summary": "x"}], False, logger=logger))

    lines = [json.loads(line) for line in stream.getvalue().splitlines()]
    summary = [line for line in lines if line["msg"] == "validation_run_completed"][0]
    assert summary["task_count"] == 2
    assert summary["error_count"] == 1
    assert summary["valid"] is False
    assert "correlation_id" in summary
