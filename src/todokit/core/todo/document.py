from __future__ import annotations

import logging
import re
from pathlib import Path

import yaml

_BLOCK_RE = re.compile(r"---\r?\n(.*?)\r?\n---", re.DOTALL)


def extract_yaml_blocks(text: str) -> list[str]:
    return [match.group(1) for match in _BLOCK_RE.finditer(text)]


def dump_block(record: dict) -> str:
    return "---\n" + yaml.safe_dump(record, sort_keys=False, allow_unicode=True) + "---"


def _block_id(body: str) -> str | None:
    try:
        data = yaml.safe_load(body)
    except yaml.YAMLError:
        return None
    if not isinstance(data, dict):
        return None
    value = data.get("id")
    return "" if value is None else str(value)


class TodoDocument:
    """Task records kept as ``---`` fenced YAML blocks inside a Markdown file."""

    def __init__(self, path: Path, logger: logging.Logger | None = None) -> None:
        self.path = Path(path)
        self.logger = logger or logging.getLogger("todokit.todo")

    def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8")

    def _write_text(self, text: str) -> None:
        self.path.write_text(text, encoding="utf-8")

    def list_tasks(self) -> list[dict]:
        tasks: list[dict] = []
        for body in extract_yaml_blocks(self.read_text()):
            try:
                parsed = yaml.safe_load(body)
            except yaml.YAMLError as exc:
                self.logger.warning(
                    "todo_block_parse_failed",
                    extra={"extra_fields": {"path": str(self.path), "error": str(exc)}},
                )
                continue
            if isinstance(parsed, dict):
                tasks.append(parsed)
        self.logger.debug("todo_tasks_listed", extra={"extra_fields": {"count": len(tasks)}})
        return tasks

    def find_task_by_id(self, task_id: str) -> dict | None:
        for task in self.list_tasks():
            if ("" if task.get("id") is None else str(task.get("id"))) == task_id:
                return task
        return None

    def update_task_by_id(self, task_id: str, updated: dict) -> bool:
        """Replace every block whose id matches; write only when something changed."""
        text = self.read_text()
        pieces: list[str] = []
        cursor = 0
        changed = False
        for match in _BLOCK_RE.finditer(text):
            if _block_id(match.group(1)) != task_id:
                continue
            pieces.append(text[cursor : match.start()])
            pieces.append(dump_block(updated))
            cursor = match.end()
            changed = True
        if not changed:
            return False
        pieces.append(text[cursor:])
        self._write_text("".join(pieces))
        self.logger.info("todo_task_updated", extra={"extra_fields": {"task_id": task_id}})
        return True

    def remove_task_by_id(self, task_id: str) -> bool:
        text = self.read_text()
        for match in _BLOCK_RE.finditer(text):
            if _block_id(match.group(1)) == task_id:
                self._write_text(text[: match.start()] + text[match.end() :])
                self.logger.info("todo_task_removed", extra={"extra_fields": {"task_id": task_id}})
                return True
        return False

    def add_task_from_file(self, source: str | Path) -> bool:
        source_path = Path(source)
        if not source_path.is_absolute():
            source_path = Path.cwd() / source_path
        if not source_path.exists():
            return False
        match = _BLOCK_RE.search(source_path.read_text(encoding="utf-8"))
        if match is None:
            return False
        self._write_text(self.read_text() + "\n" + match.group(0) + "\n")
        self.logger.info("todo_task_appended", extra={"extra_fields": {"source": str(source)}})
        return True

    def preview_complete(self, task_id: str) -> str:
        task = self.find_task_by_id(task_id)
        if task is None:
            return f"Task {task_id} not found"
        return "\n".join(
            [
                f"Will remove task {task_id} from {self.path.name}",
                f"Will append to CHANGELOG.md Unreleased: {task.get('id')} — {task.get('summary')}",
            ]
        )
