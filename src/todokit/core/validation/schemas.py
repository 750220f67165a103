from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

Task = dict[str, Any]


class FixRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    field: str
    old: Any = None
    new: Any


class ValidationReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: tuple[str, ...] | None = None
    fixes_applied: int | None = None
    fixes: tuple[FixRecord, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path} {self.message}"


@dataclass
class SchemaCheck:
    ok: bool
    errors: list[ValidationIssue] = field(default_factory=list)


@dataclass
class TaskOutcome:
    """What processing one record contributed to the report."""

    index: int
    task_id: str
    excluded: bool = False
    persisted: bool = False
    errors: list[str] = field(default_factory=list)
    fixes: list[FixRecord] = field(default_factory=list)


def format_issues(issues: list[ValidationIssue]) -> str:
    return "; ".join(str(issue) for issue in issues)
