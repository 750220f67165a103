from __future__ import annotations

import json
import logging
import traceback
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from .context import get_log_context

# context keys always present on a line, null when unbound
CONTEXT_KEYS = ("correlation_id", "task_id", "command")


def _to_json(value: Any) -> Any:
    """Fallback for values ``json`` cannot encode on its own.

    Fix records and reports go out in their wire form; YAML dates and
    timestamps as ISO strings.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if isinstance(value, Path):
        return str(value)
    return repr(value)


class JSONFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, event, run context, fields."""

    def format(self, record: logging.LogRecord) -> str:
        bound = get_log_context()
        payload: dict[str, Any] = {
            "ts_iso_utc": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in CONTEXT_KEYS:
            payload[key] = bound.get(key)

        fields = getattr(record, "extra_fields", None)
        if isinstance(fields, dict):
            # an explicit field wins over the bound context value
            payload.update(fields)

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            payload["error"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "stack": "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
            }

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=_to_json)
