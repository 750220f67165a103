from __future__ import annotations


class TodoKitError(RuntimeError):
    """Base error for todokit operations."""


class SchemaLoadError(TodoKitError):
    """Raised when the task schema is missing, unreadable or not a valid JSON schema."""

    def __init__(self, message: str, schema_path: str | None = None) -> None:
        super().__init__(message)
        self.schema_path = schema_path


class TaskStoreError(TodoKitError):
    """Raised by task stores when a record could not be written."""

    def __init__(self, message: str, task_id: str | None = None) -> None:
        super().__init__(message)
        self.task_id = task_id


class TaskNotFoundError(TodoKitError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"task {task_id} not found")
        self.task_id = task_id
