from __future__ import annotations

import json
import logging
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from planning_toolkit.core.check.completeness import CompletenessReport, check_phase_completeness
from planning_toolkit.core.check.consistency import ConsistencyReport, check_consistency
from planning_toolkit.core.check.progress import ProgressReport, build_progress
from planning_toolkit.core.errors import PlanningConfigError, PlanningError
from planning_toolkit.core.io.project import Project, open_project
from planning_toolkit.core.log import setup_logging
from planning_toolkit.core.milestone.complete import MilestoneReport, complete_milestone
from planning_toolkit.core.model import ErrorReport
from planning_toolkit.core.requirements.ledger import MarkCompleteResult, mark_requirements_complete
from planning_toolkit.core.validate.plan_structure import PlanStructureReport, verify_plan_structure

app = typer.Typer(add_completion=False, no_args_is_help=True)
requirements_app = typer.Typer(no_args_is_help=True, help="REQUIREMENTS.md checklist + table.")
verify_app = typer.Typer(no_args_is_help=True, help="Verify plans and phases.")
validate_app = typer.Typer(no_args_is_help=True, help="Cross-document validation.")
milestone_app = typer.Typer(no_args_is_help=True, help="Milestone lifecycle.")
app.add_typer(requirements_app, name="requirements")
app.add_typer(verify_app, name="verify")
app.add_typer(validate_app, name="validate")
app.add_typer(milestone_app, name="milestone")

console = Console()

FORMATS = ("json", "text")


@app.callback()
def _callback(
    ctx: typer.Context,
    cwd: Optional[str] = typer.Option(None, "--cwd", help="Project root (default: current directory)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
    log_json: bool = typer.Option(False, "--log-json", help="Log records as JSON lines"),
) -> None:
    """Planning document toolkit."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING, json_format=log_json)
    ctx.obj = {"cwd": cwd}


@requirements_app.command("mark-complete")
def requirements_mark_complete(
    ctx: typer.Context,
    ids: list[str] = typer.Argument(..., help="IDs: TEST-01,TEST-02 | TEST-01 TEST-02 | [TEST-01,TEST-02]"),
    format: str = typer.Option("json", "--format", help="Output format: json|text"),
) -> None:
    """Check off requirements in both the checklist and the traceability table."""
    _check_format(format)
    _emit(mark_requirements_complete(_project(ctx), ids), format)


@verify_app.command("plan-structure")
def verify_plan_structure_cmd(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Plan file, relative to the project root"),
    format: str = typer.Option("json", "--format", help="Output format: json|text"),
) -> None:
    """Check a PLAN.md's frontmatter and <task> blocks."""
    _check_format(format)
    _emit(verify_plan_structure(_project(ctx), path), format)


@verify_app.command("phase-completeness")
def verify_phase_completeness_cmd(
    ctx: typer.Context,
    phase: str = typer.Argument(..., help="Phase number (01) or directory name (01-setup)"),
    format: str = typer.Option("json", "--format", help="Output format: json|text"),
) -> None:
    """Check that every plan in a phase has a summary."""
    _check_format(format)
    _emit(check_phase_completeness(_project(ctx), phase), format)


@validate_app.command("consistency")
def validate_consistency_cmd(
    ctx: typer.Context,
    format: str = typer.Option("json", "--format", help="Output format: json|text"),
) -> None:
    """Cross-check ROADMAP.md phases against phase directories."""
    _check_format(format)
    _emit(check_consistency(_project(ctx)), format)


@milestone_app.command("complete")
def milestone_complete_cmd(
    ctx: typer.Context,
    version: str = typer.Argument(..., help="Milestone version, e.g. v1.0"),
    name: Optional[str] = typer.Option(None, "--name", help="Milestone name (default: version)"),
    archive_phases: Optional[bool] = typer.Option(
        None,
        "--archive-phases/--no-archive-phases",
        help="Move phase directories under milestones/<version>-phases (default from config)",
    ),
    format: str = typer.Option("json", "--format", help="Output format: json|text"),
) -> None:
    """Archive roadmap/requirements, record the milestone and update STATE.md."""
    _check_format(format)
    _emit(complete_milestone(_project(ctx), version, name=name, archive_phases=archive_phases), format)


@app.command("progress")
def progress_cmd(
    ctx: typer.Context,
    format: str = typer.Option("json", "--format", help="Output format: json|text"),
) -> None:
    """Plan/summary progress per phase."""
    _check_format(format)
    _emit(build_progress(_project(ctx)), format)


def _check_format(format: str) -> None:
    if format not in FORMATS:
        _print_errors(
            [
                PlanningError(
                    code="E_UNKNOWN_FORMAT",
                    message=f"unknown format: {format} (choose one of: {', '.join(FORMATS)})",
                    subject="--format",
                )
            ]
        )
        raise typer.Exit(code=2)


def _project(ctx: typer.Context) -> Project:
    obj = ctx.obj or {}
    try:
        return open_project(obj.get("cwd"))
    except PlanningConfigError as e:
        _print_errors([e])
        raise typer.Exit(code=2)


def _emit(result: Any, format: str) -> None:
    if format == "json":
        typer.echo(json.dumps(result.to_dict(), indent=2, sort_keys=True))
        return
    _render_text(result)


def _render_text(result: Any) -> None:
    if isinstance(result, ErrorReport):
        console.print(f"[red]ERROR[/red] {result.code}: {escape(result.error)}")
    elif isinstance(result, MarkCompleteResult):
        if result.reason:
            console.print(f"Not updated: {result.reason}")
            return
        console.print(f"Marked complete: {', '.join(result.marked_complete) or '-'}")
        console.print(f"Not found: {', '.join(result.not_found) or '-'}")
        console.print(f"Total: {result.total}")
    elif isinstance(result, PlanStructureReport):
        console.print("OK: plan is valid" if result.valid else "INVALID plan")
        console.print(f"Tasks: {result.task_count}")
        _print_findings(result.errors, result.warnings)
    elif isinstance(result, CompletenessReport):
        state = "complete" if result.complete else "incomplete"
        console.print(
            f"{result.phase}: {state} ({result.plan_count} plans, {result.summary_count} summaries)"
        )
        _print_findings(result.errors, result.warnings)
    elif isinstance(result, ConsistencyReport):
        console.print("OK: consistent" if result.passed else f"{result.warning_count} warning(s)")
        _print_findings([], result.warnings)
    elif isinstance(result, MilestoneReport):
        console.print(f"{result.version} {result.name} shipped {result.date}")
        console.print(f"{result.phases} phases, {result.plans} plans, {result.tasks} tasks")
        for label, done in (
            ("roadmap", result.archived.roadmap),
            ("requirements", result.archived.requirements),
            ("phases", result.archived.phases),
        ):
            console.print(f"archived {label}: {'yes' if done else 'no'}")
        console.print(f"STATE.md updated: {'yes' if result.state_updated else 'no'}")
    elif isinstance(result, ProgressReport):
        table = Table(title=f"Progress ({result.percent}%)")
        table.add_column("Phase")
        table.add_column("Name")
        table.add_column("Plans")
        table.add_column("Summaries")
        table.add_column("Status")
        for p in result.phases:
            table.add_row(str(p.number), p.name, str(p.plans), str(p.summaries), p.status)
        console.print(table)


def _print_findings(errors: list[str], warnings: list[str]) -> None:
    for e in errors:
        console.print(f"[red]error[/red]: {escape(e)}", highlight=False)
    for w in warnings:
        console.print(f"[yellow]warning[/yellow]: {escape(w)}", highlight=False)


def _print_errors(errors: list[PlanningError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.file or "", e.subject or "", e.code))
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="planning")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
