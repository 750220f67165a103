from __future__ import annotations

import json
import os
from pathlib import Path

from todokit.core.errors import SchemaLoadError

PACKAGED_SCHEMA_PATH = Path(__file__).resolve().parents[2] / "schemas" / "task-schema.json"


def resolve_schema_path(schema_path: str | Path | None = None) -> Path:
    if schema_path:
        return Path(schema_path).expanduser()
    configured = os.getenv("TODOKIT_SCHEMA_PATH")
    if configured:
        return Path(configured).expanduser()
    return PACKAGED_SCHEMA_PATH


class SchemaLoader:
    def __init__(self, schema_path: str | Path | None = None) -> None:
        self.schema_path = resolve_schema_path(schema_path)

    def load(self) -> dict:
        if not self.schema_path.exists():
            raise SchemaLoadError(f"Schema file not found: {self.schema_path}", str(self.schema_path))
        try:
            with self.schema_path.open("r", encoding="utf-8") as handle:
                schema = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise SchemaLoadError(f"Schema file unreadable: {self.schema_path}: {exc}", str(self.schema_path)) from exc
        if not isinstance(schema, dict):
            raise SchemaLoadError(f"Schema must be a JSON object: {self.schema_path}", str(self.schema_path))
        return schema
