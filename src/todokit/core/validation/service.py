from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Iterable
from uuid import uuid4

from todokit.core.config import TodoKitSettings
from todokit.core.logging.context import log_context

from .base import TaskStore
from .context import ValidationContext
from .factory import build_components
from .processor import TaskProcessor
from .schemas import Task, ValidationReport


class TaskValidationService:
    def __init__(
        self,
        schema_path: str | Path | None = None,
        today: str | None = None,
        settings: TodoKitSettings | None = None,
    ) -> None:
        self.schema_path = schema_path or (settings.schema_path if settings else None)
        self.today = today
        self.settings = settings

    async def validate_and_fix_tasks(
        self,
        tasks: Iterable[Task],
        apply_fixes: bool,
        exclude_pattern: str | None = None,
        store: TaskStore | None = None,
        logger: logging.Logger | None = None,
    ) -> ValidationReport:
        context = ValidationContext(
            tasks=tuple(tasks),
            apply_fixes=apply_fixes,
            exclude_pattern=exclude_pattern,
            store=store,
            logger=logger,
            settings=self.settings,
        )
        components = build_components(context, schema_path=self.schema_path, today=self.today)
        processor = TaskProcessor(
            validator=components.validator,
            fixer=components.fixer,
            exclusion_filter=components.exclusion_filter,
            result_builder=components.result_builder,
            context=context,
        )
        log = context.get_logger()
        started_at = time.perf_counter()

        with log_context(correlation_id=str(uuid4())):
            outcomes = await asyncio.gather(
                *(processor.evaluate(task, index) for index, task in enumerate(context.tasks))
            )
            # merged after the join, in batch order
            for outcome in outcomes:
                components.result_builder.add_outcome(outcome)
            report = components.result_builder.build()

            log.info(
                "validation_run_completed",
                extra={
                    "extra_fields": {
                        "task_count": len(context.tasks),
                        "excluded": sum(1 for outcome in outcomes if outcome.excluded),
                        "apply_fixes": apply_fixes,
                        "valid": report.valid,
                        "error_count": len(report.errors or ()),
                        "fix_count": len(report.fixes or ()),
                        "fixes_applied": report.fixes_applied or 0,
                        "duration_ms": int((time.perf_counter() - started_at) * 1000),
                    }
                },
            )
        return report


async def validate_and_fix_tasks(
    tasks: Iterable[Task],
    apply_fixes: bool,
    exclude_pattern: str | None = None,
    store: TaskStore | None = None,
    logger: logging.Logger | None = None,
    *,
    schema_path: str | Path | None = None,
    today: str | None = None,
) -> ValidationReport:
    service = TaskValidationService(schema_path=schema_path, today=today)
    return await service.validate_and_fix_tasks(tasks, apply_fixes, exclude_pattern, store, logger)
