from __future__ import annotations

import threading
from functools import lru_cache
from pathlib import Path
from typing import Iterable

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError

from todokit.core.errors import SchemaLoadError

from .schema_loader import SchemaLoader, resolve_schema_path
from .schemas import SchemaCheck, Task, ValidationIssue, ValidationReport, format_issues


def _instance_path(error) -> str:
    return "".join(f"/{part}" for part in error.absolute_path)


class JsonSchemaTaskValidator:
    def __init__(self, loader: SchemaLoader | None = None) -> None:
        self.loader = loader or SchemaLoader()
        self._validator: Draft7Validator | None = None
        self._lock = threading.Lock()

    @property
    def compiled(self) -> bool:
        return self._validator is not None

    def compile(self) -> Draft7Validator:
        with self._lock:
            if self._validator is None:
                schema = self.loader.load()
                try:
                    Draft7Validator.check_schema(schema)
                except SchemaError as exc:
                    raise SchemaLoadError(
                        f"Invalid task schema {self.loader.schema_path}: {exc.message}",
                        str(self.loader.schema_path),
                    ) from exc
                self._validator = Draft7Validator(schema)
        return self._validator

    def validate(self, record: Task) -> SchemaCheck:
        validator = self._validator or self.compile()
        issues = [
            ValidationIssue(path=_instance_path(error), message=error.message)
            for error in validator.iter_errors(record)
        ]
        # iter_errors order follows schema keyword order; sort for stable messages
        issues.sort(key=lambda issue: (issue.path, issue.message))
        return SchemaCheck(ok=not issues, errors=issues)


@lru_cache(maxsize=8)
def _validator_for(schema_path: str) -> JsonSchemaTaskValidator:
    return JsonSchemaTaskValidator(SchemaLoader(schema_path))


def create_validator(schema_path: str | Path | None = None) -> JsonSchemaTaskValidator:
    """Return the process-wide validator for a schema file, compiled on first use."""
    return _validator_for(str(resolve_schema_path(schema_path)))


def clear_validator_cache() -> None:
    _validator_for.cache_clear()


def validate_tasks(records: Iterable[Task], validator: JsonSchemaTaskValidator | None = None) -> ValidationReport:
    """Check records against the schema without attempting any fixes."""
    active = validator or create_validator()
    errors: list[str] = []
    for index, record in enumerate(records):
        check = active.validate(record)
        if not check.ok:
            errors.append(f"Task[{index}] validation failed: {format_issues(check.errors)}")
    return ValidationReport(valid=not errors, errors=tuple(errors) if errors else None)
