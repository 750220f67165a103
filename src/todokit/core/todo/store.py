from __future__ import annotations

import asyncio

import yaml

from todokit.core.errors import TaskStoreError

from .document import TodoDocument


class DocumentTaskStore:
    """Async task store writing through to a ``TodoDocument``.

    Writes are serialized: each update rewrites the whole file.
    """

    def __init__(self, document: TodoDocument) -> None:
        self.document = document
        self._lock = asyncio.Lock()

    async def update_task_by_id(self, task_id: str, task: dict) -> bool:
        async with self._lock:
            try:
                return await asyncio.to_thread(self.document.update_task_by_id, task_id, task)
            except (OSError, yaml.YAMLError) as exc:
                raise TaskStoreError(f"failed to update {task_id} in {self.document.path}: {exc}", task_id) from exc
