from __future__ import annotations

import logging
from pathlib import Path

from todokit.core.errors import TaskNotFoundError, TaskStoreError

from .document import TodoDocument

_HEADING = "Unreleased"


class Changelog:
    def __init__(self, path: Path, logger: logging.Logger | None = None) -> None:
        self.path = Path(path)
        self.logger = logger or logging.getLogger("todokit.changelog")

    def append(self, entry: str) -> None:
        """Add ``- entry`` directly below the ``Unreleased`` heading."""
        line = f"- {entry}\n"
        if not self.path.exists():
            self.path.write_text(f"# Changelog\n\n{_HEADING}\n\n{line}", encoding="utf-8")
            self.logger.info("changelog_created", extra={"extra_fields": {"entry": entry}})
            return

        content = self.path.read_text(encoding="utf-8")
        idx = content.find(_HEADING)
        if idx == -1:
            self.path.write_text(f"# Changelog\n\n{_HEADING}\n\n{line}\n{content}", encoding="utf-8")
        else:
            line_end = content.find("\n", idx)
            if line_end == -1:
                content += "\n"
                line_end = len(content) - 1
            insert_at = line_end + 1
            self.path.write_text(content[:insert_at] + line + content[insert_at:], encoding="utf-8")
        self.logger.info("changelog_appended", extra={"extra_fields": {"entry": entry}})


def complete_task(
    document: TodoDocument,
    changelog: Changelog,
    task_id: str,
    message: str | None = None,
) -> str:
    """Move a task out of the TODO document and into the changelog.

    Returns the changelog entry written.
    """
    task = document.find_task_by_id(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    summary = task.get("summary")
    entry = f"{task.get('id')} — {summary} — {message or summary}"
    if not document.remove_task_by_id(task_id):
        raise TaskStoreError(f"failed to remove task {task_id} from {document.path}", task_id)
    changelog.append(entry)
    return entry
