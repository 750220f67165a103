from __future__ import annotations

from .schemas import FixRecord, TaskOutcome, ValidationReport


class ValidationResultBuilder:
    """Collects errors and fixes for one validation run.

    Appends keep insertion order. ``build`` returns an immutable report in
    which empty collections and a zero counter are left out.
    """

    def __init__(self) -> None:
        self._errors: list[str] = []
        self._fixes: list[FixRecord] = []
        self._fixes_applied = 0

    def add_error(self, error: str) -> None:
        self._errors.append(error)

    def add_fixes(self, fixes: list[FixRecord]) -> None:
        self._fixes.extend(fixes)

    def increment_fixes_applied(self) -> None:
        self._fixes_applied += 1

    def add_outcome(self, outcome: TaskOutcome) -> None:
        if outcome.excluded:
            return
        if outcome.fixes:
            self.add_fixes(outcome.fixes)
        if outcome.persisted:
            self.increment_fixes_applied()
        for error in outcome.errors:
            self.add_error(error)

    def build(self) -> ValidationReport:
        return ValidationReport(
            valid=not self._errors,
            errors=tuple(self._errors) if self._errors else None,
            fixes_applied=self._fixes_applied or None,
            fixes=tuple(self._fixes) if self._fixes else None,
        )
