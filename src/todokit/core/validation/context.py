from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property

from todokit.core.config import TodoKitSettings, load_settings

from .base import TaskStore
from .schemas import Task


@dataclass(frozen=True)
class ValidationContext:
    """Inputs of a single validation run; never reused across runs."""

    tasks: tuple[Task, ...]
    apply_fixes: bool
    exclude_pattern: str | None = None
    store: TaskStore | None = None
    logger: logging.Logger | None = None
    settings: TodoKitSettings | None = field(default=None, compare=False)

    def get_logger(self) -> logging.Logger:
        return self.logger or logging.getLogger("todokit.validation")

    def get_task_store(self) -> TaskStore:
        return self.store or self._default_store

    @cached_property
    def _default_store(self) -> TaskStore:
        from todokit.core.todo.document import TodoDocument
        from todokit.core.todo.store import DocumentTaskStore

        settings = self.settings or load_settings()
        return DocumentTaskStore(TodoDocument(settings.todo_path, logger=self.get_logger()))
