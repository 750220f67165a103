from __future__ import annotations

from todokit.core.errors import TaskStoreError
from todokit.core.logging.context import log_context

from .base import ExclusionFilter, ResultBuilder, TaskFixer, TaskValidator
from .context import ValidationContext
from .schemas import SchemaCheck, Task, TaskOutcome, format_issues


class TaskProcessor:
    """Validates, fixes and optionally persists one task record at a time.

    A record ends in one of these states:

    * excluded by the filter, or already valid: nothing is reported;
    * invalid without an id: a "cannot auto-fix" error;
    * invalid with an id: the fixer runs. With no applicable fix the original
      schema errors are reported. Otherwise the fixes are reported, persisted
      when the context asks for it, and the record is validated again.

    ``evaluate`` returns the per-record outcome without touching shared state.
    Batch runs call it concurrently and merge the outcomes in input order.
    ``process_task`` also records the outcome in the bound result builder;
    it is the path for callers handling one record at a time.
    """

    def __init__(
        self,
        validator: TaskValidator,
        fixer: TaskFixer,
        exclusion_filter: ExclusionFilter,
        result_builder: ResultBuilder,
        context: ValidationContext,
    ) -> None:
        self.validator = validator
        self.fixer = fixer
        self.exclusion_filter = exclusion_filter
        self.result_builder = result_builder
        self.context = context
        self.logger = context.get_logger()

    async def process_task(self, task: Task, index: int) -> TaskOutcome:
        outcome = await self.evaluate(task, index)
        self.result_builder.add_outcome(outcome)
        return outcome

    async def evaluate(self, task: Task, index: int) -> TaskOutcome:
        record = dict(task)
        task_id = "" if record.get("id") is None else str(record.get("id"))
        outcome = TaskOutcome(index=index, task_id=task_id)

        if self.exclusion_filter.should_exclude(record):
            outcome.excluded = True
            self.logger.debug("task_excluded", extra={"extra_fields": {"index": index, "task_id": task_id}})
            return outcome

        check = self.validator.validate(record)
        if check.ok:
            return outcome

        if not task_id:
            outcome.errors.append(f"Task[{index}] has no id; cannot auto-fix")
            return outcome

        with log_context(task_id=task_id):
            await self._apply_fixes(record, index, check, outcome)
        return outcome

    async def _apply_fixes(self, record: Task, index: int, check: SchemaCheck, outcome: TaskOutcome) -> None:
        fixes = self.fixer.apply_basic_fixes(record)
        if not fixes:
            outcome.errors.append(f"Task[{index}] validation failed: {format_issues(check.errors)}")
            return

        outcome.fixes.extend(fixes)
        if self.context.apply_fixes and not await self._persist_fixes(record, index, outcome):
            return

        recheck = self.validator.validate(record)
        if not recheck.ok:
            outcome.errors.append(f"Task[{index}] validation failed after fixes: {format_issues(recheck.errors)}")

    async def _persist_fixes(self, record: Task, index: int, outcome: TaskOutcome) -> bool:
        store = self.context.get_task_store()
        try:
            written = await store.update_task_by_id(outcome.task_id, record)
        except TaskStoreError as exc:
            self.logger.warning(
                "task_persist_failed",
                extra={"extra_fields": {"index": index, "reason": str(exc)}},
            )
            written = False

        if not written:
            outcome.errors.append(f"Task[{index}] fixes could not be persisted (id={outcome.task_id})")
            return False

        outcome.persisted = True
        self.logger.info("task_fixes_persisted", extra={"extra_fields": {"fix_count": len(outcome.fixes)}})
        return True
