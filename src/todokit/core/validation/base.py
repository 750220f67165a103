from __future__ import annotations

from typing import Protocol

from .schemas import FixRecord, SchemaCheck, Task, TaskOutcome, ValidationReport


class TaskValidator(Protocol):
    def validate(self, record: Task) -> SchemaCheck: ...


class TaskFixer(Protocol):
    def apply_basic_fixes(self, record: Task) -> list[FixRecord]: ...


class ExclusionFilter(Protocol):
    def should_exclude(self, record: Task) -> bool: ...


class ResultBuilder(Protocol):
    def add_error(self, error: str) -> None: ...

    def add_fixes(self, fixes: list[FixRecord]) -> None: ...

    def increment_fixes_applied(self) -> None: ...

    def add_outcome(self, outcome: TaskOutcome) -> None: ...

    def build(self) -> ValidationReport: ...


class TaskStore(Protocol):
    async def update_task_by_id(self, task_id: str, task: Task) -> bool: ...
