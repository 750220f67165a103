from .context import ValidationContext
from .exclusion import GlobExclusionFilter
from .factory import ValidationComponents, build_components
from .fixer import BasicTaskFixer
from .processor import TaskProcessor
from .result_builder import ValidationResultBuilder
from .schema_loader import SchemaLoader
from .schemas import FixRecord, SchemaCheck, TaskOutcome, ValidationIssue, ValidationReport, format_issues
from .service import TaskValidationService, validate_and_fix_tasks
from .validator import JsonSchemaTaskValidator, clear_validator_cache, create_validator, validate_tasks

__all__ = [
    "BasicTaskFixer",
    "FixRecord",
    "GlobExclusionFilter",
    "JsonSchemaTaskValidator",
    "SchemaCheck",
    "SchemaLoader",
    "TaskOutcome",
    "TaskProcessor",
    "TaskValidationService",
    "ValidationComponents",
    "ValidationContext",
    "ValidationIssue",
    "ValidationReport",
    "ValidationResultBuilder",
    "build_components",
    "clear_validator_cache",
    "create_validator",
    "format_issues",
    "validate_and_fix_tasks",
    "validate_tasks",
]
