from __future__ import annotations

import argparse
import asyncio
import csv
import json
import logging
import sys

from todokit.core.config import TodoKitSettings, load_settings
from todokit.core.errors import SchemaLoadError, TaskNotFoundError, TaskStoreError
from todokit.core.logging import configure_logging, log_context
from todokit.core.todo import Changelog, DocumentTaskStore, TodoDocument, complete_task
from todokit.core.validation import TaskValidationService, ValidationReport, create_validator, validate_tasks

EXIT_NOT_FOUND = 2
EXIT_REMOVE_FAILED = 3
EXIT_INVALID = 4
EXIT_ERRORS_REMAIN = 5

logger = logging.getLogger("todokit.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="todokit", description="Manage tasks kept in TODO.md")
    parser.add_argument("--config", default=None, help="YAML settings file (defaults to ./todokit.yaml)")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="List active tasks in TODO.md")

    show = commands.add_parser("show", help="Show a single task")
    show.add_argument("id", help="Task id to show (e.g. T-001)")

    add = commands.add_parser("add", help="Append the first task block of a file to TODO.md")
    add.add_argument("file", help="Markdown file containing a task block")

    complete = commands.add_parser("complete", help="Remove a task and add it to CHANGELOG.md Unreleased")
    complete.add_argument("id", help="Task id to complete")
    complete.add_argument("-m", "--message", default=None, help="Short message or PR link for the changelog")
    complete.add_argument("--dry-run", action="store_true", help="Preview changes without writing files")

    validate = commands.add_parser("validate", help="Validate tasks against the task schema")
    validate.add_argument("--fix", action="store_true", help="Auto-fix common issues and write changes")
    validate.add_argument("--dry-run", action="store_true", help="Show fixes without writing files")
    validate.add_argument("--exclude", default=None, help="Glob-like pattern of tasks to skip")
    validate.add_argument("--summary", choices=["json", "csv"], default=None, help="Fix summary format")
    return parser


def _cmd_list(document: TodoDocument) -> int:
    tasks = document.list_tasks()
    if not tasks:
        print(f"No tasks found in {document.path.name}")
        return 0
    for task in tasks:
        print(f"{task.get('id')}  {task.get('priority') or 'P2'}  {task.get('summary') or ''}")
    return 0


def _cmd_show(document: TodoDocument, task_id: str) -> int:
    task = document.find_task_by_id(task_id)
    if task is None:
        print(f"Task {task_id} not found", file=sys.stderr)
        return EXIT_NOT_FOUND
    print(f"{task.get('id')} — {task.get('summary')}")
    print(f"Status: {task.get('status') or ''}")
    print(f"Owner: {task.get('owner') or 'Unassigned'}")
    print()
    print("Detailed requirements:")
    print(json.dumps(task.get("detailed_requirements") or {}, indent=2, default=str))
    print()
    print("Validations:")
    print(json.dumps(task.get("validations") or [], indent=2, default=str))
    return 0


def _cmd_add(document: TodoDocument, source: str) -> int:
    if document.add_task_from_file(source):
        print(f"Task added to {document.path.name} from {source}")
        return 0
    print(f"Failed to add task from {source}", file=sys.stderr)
    return 1


def _cmd_complete(settings: TodoKitSettings, document: TodoDocument, args: argparse.Namespace) -> int:
    if args.dry_run:
        print("Dry run preview:")
        print(document.preview_complete(args.id))
        return 0
    changelog = Changelog(settings.changelog_path)
    try:
        complete_task(document, changelog, args.id, message=args.message)
    except TaskNotFoundError:
        print(f"Task {args.id} not found in {document.path.name}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except (OSError, TaskStoreError) as exc:
        print(f"Failed to complete task {args.id}: {exc}", file=sys.stderr)
        return EXIT_REMOVE_FAILED
    print(f"Task {args.id} completed and moved to {changelog.path.name} Unreleased")
    return 0


def _print_fix_summary(report: ValidationReport, summary: str | None, dry_run: bool) -> None:
    fixes = report.fixes or ()
    if summary == "json":
        payload = report.to_dict()
        print(json.dumps({"fixes": payload.get("fixes", []), "errors": payload.get("errors", [])}, indent=2))
        return
    if summary == "csv":
        writer = csv.writer(sys.stdout, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(["id", "field", "old", "new"])
        for fix in fixes:
            writer.writerow([fix.id, fix.field, "" if fix.old is None else fix.old, fix.new])
        return
    if dry_run:
        print(f"Planned {len(fixes)} fixes (dry-run):")
    else:
        print(f"Applied fixes to {report.fixes_applied or 0} tasks:")
    for fix in fixes:
        print(f"- {fix.id}: {fix.field} -> {fix.new}")


def _cmd_validate(settings: TodoKitSettings, document: TodoDocument, args: argparse.Namespace) -> int:
    tasks = document.list_tasks()
    if not (args.fix or args.dry_run):
        report = validate_tasks(tasks, create_validator(settings.schema_path))
        if report.valid:
            print(f"All {len(tasks)} tasks validate against schema")
            return 0
        print("Validation errors:", file=sys.stderr)
        for error in report.errors or ():
            print(f"- {error}", file=sys.stderr)
        return EXIT_INVALID

    apply_fixes = args.fix and not args.dry_run
    service = TaskValidationService(settings=settings)
    report = asyncio.run(
        service.validate_and_fix_tasks(
            tasks,
            apply_fixes,
            exclude_pattern=args.exclude,
            store=DocumentTaskStore(document),
            logger=logging.getLogger("todokit.validation"),
        )
    )
    if report.valid and not report.fixes:
        print(f"All {len(tasks)} tasks validate against schema")
        return 0
    if report.fixes:
        _print_fix_summary(report, args.summary, args.dry_run)
    if report.errors:
        print("Remaining validation errors:", file=sys.stderr)
        for error in report.errors:
            print(f"- {error}", file=sys.stderr)
    if not args.summary:
        if args.dry_run:
            print(f"Dry-run complete; {len(report.fixes or ())} fixes would have been applied.")
        else:
            print(f"Validation and fixes completed; {report.fixes_applied or 0} tasks written.")
    return EXIT_ERRORS_REMAIN if report.errors else 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = load_settings(args.config)
    configure_logging(
        log_dir=settings.root if settings.logging.log_dir is None else settings.root / settings.logging.log_dir,
        level=settings.logging.level,
    )
    document = TodoDocument(settings.todo_path)

    with log_context(command=args.command):
        logger.debug("cli_start", extra={"extra_fields": {"argv": sys.argv[1:] if argv is None else argv}})
        try:
            if args.command == "list":
                return _cmd_list(document)
            if args.command == "show":
                return _cmd_show(document, args.id)
            if args.command == "add":
                return _cmd_add(document, args.file)
            if args.command == "complete":
                return _cmd_complete(settings, document, args)
            return _cmd_validate(settings, document, args)
        except SchemaLoadError as exc:
            logger.error("schema_load_failed", extra={"extra_fields": {"schema_path": exc.schema_path}})
            print(f"Cannot load task schema: {exc}", file=sys.stderr)
            return 1
        except FileNotFoundError as exc:
            print(f"File not found: {exc.filename}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    raise SystemExit(main())
