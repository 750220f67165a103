from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .base import ExclusionFilter, ResultBuilder, TaskFixer, TaskValidator
from .context import ValidationContext
from .exclusion import GlobExclusionFilter
from .fixer import BasicTaskFixer
from .result_builder import ValidationResultBuilder
from .validator import create_validator


@dataclass
class ValidationComponents:
    validator: TaskValidator
    fixer: TaskFixer
    exclusion_filter: ExclusionFilter
    result_builder: ResultBuilder


def build_components(
    context: ValidationContext,
    schema_path: str | Path | None = None,
    today: str | None = None,
) -> ValidationComponents:
    return ValidationComponents(
        validator=create_validator(schema_path),
        fixer=BasicTaskFixer(logger=context.get_logger().getChild("fixer"), today=today),
        exclusion_filter=GlobExclusionFilter(context.exclude_pattern),
        result_builder=ValidationResultBuilder(),
    )
