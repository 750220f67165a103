from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime, time, timezone
from typing import Any

from dateutil import parser as date_parser

from .schemas import FixRecord, Task

VALID_PRIORITIES = ("P0", "P1", "P2", "P3")
DEFAULT_PRIORITY = "P2"
VALID_STATUSES = ("open", "in-progress", "blocked", "done")
DEFAULT_STATUS = "open"

_WHITESPACE_RE = re.compile(r"\s+")


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _is_falsy(value: Any) -> bool:
    # empty containers count as present
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, (str, int, float, bool)):
        return not value
    return False


def _parse_date(raw: str, default: datetime) -> date | None:
    # parts missing from raw come from default, not the wall clock
    try:
        parsed = date_parser.parse(raw, default=default)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def _title_case(value: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split(" "))


class BasicTaskFixer:
    """Deterministic normalization rules for a single task record.

    Every rule runs on every call and mutates the record in place; the
    returned list holds one ``FixRecord`` per changed field, in rule order.
    ``today`` is the reference date used for missing or unparseable dates.
    """

    def __init__(self, logger: logging.Logger | None = None, today: str | None = None) -> None:
        self.logger = logger or logging.getLogger("todokit.validation.fixer")
        self.today = today or datetime.now(timezone.utc).date().isoformat()
        self._default_moment = datetime.combine(date.fromisoformat(self.today), time())

    def apply_basic_fixes(self, record: Task) -> list[FixRecord]:
        task_id = _text(record.get("id"))
        fixes: list[FixRecord] = []

        self._fix_choice(record, "priority", VALID_PRIORITIES, DEFAULT_PRIORITY, task_id, fixes)
        self._fix_choice(record, "status", VALID_STATUSES, DEFAULT_STATUS, task_id, fixes)
        self._fix_date(record, "created", task_id, fixes)
        self._fix_date(record, "updated", task_id, fixes)
        self._fix_owner(record, task_id, fixes)
        if _is_falsy(record.get("validations")):
            self._set(record, "validations", [], task_id, fixes)

        if fixes:
            self.logger.debug(
                "task_fixes_planned",
                extra={"extra_fields": {"task_id": task_id, "fields": [fix.field for fix in fixes]}},
            )
        return fixes

    def _set(self, record: Task, field: str, new: Any, task_id: str, fixes: list[FixRecord]) -> None:
        fixes.append(FixRecord(id=task_id, field=field, old=record.get(field), new=new))
        record[field] = list(new) if isinstance(new, list) else new

    def _fix_choice(
        self,
        record: Task,
        field: str,
        allowed: tuple[str, ...],
        default: str,
        task_id: str,
        fixes: list[FixRecord],
    ) -> None:
        if _text(record.get(field)) not in allowed:
            self._set(record, field, default, task_id, fixes)

    def _fix_date(self, record: Task, field: str, task_id: str, fixes: list[FixRecord]) -> None:
        value = record.get(field)
        raw = _text(value)
        parsed = _parse_date(raw, self._default_moment) if raw else None
        if parsed is None:
            self._set(record, field, self.today, task_id, fixes)
            return
        normalized = parsed.isoformat()
        # YAML date objects compare unequal to their string form and get rewritten
        if value != normalized:
            self._set(record, field, normalized, task_id, fixes)

    def _fix_owner(self, record: Task, task_id: str, fixes: list[FixRecord]) -> None:
        owner = _text(record.get("owner")).strip()
        if not owner:
            return
        canonical = _title_case(_WHITESPACE_RE.sub(" ", owner))
        if canonical != owner:
            self._set(record, "owner", canonical, task_id, fixes)
