from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from planning_toolkit.core.errors import PlanningLoadError
from planning_toolkit.core.io.load_document import load_document
from planning_toolkit.core.io.project import Project
from planning_toolkit.core.model import Document, ErrorReport, TaskBlock


logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = (
    "phase",
    "plan",
    "type",
    "wave",
    "depends_on",
    "files_modified",
    "autonomous",
    "must_haves",
)

CHECKPOINT_PREFIX = "checkpoint"


@dataclass(frozen=True)
class PlanStructureReport:
    valid: bool
    errors: list[str]
    warnings: list[str]
    task_count: int
    tasks: list[dict[str, Any]] = field(default_factory=list)
    frontmatter_fields: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "task_count": self.task_count,
            "tasks": list(self.tasks),
            "frontmatter_fields": list(self.frontmatter_fields),
        }


def _is_blank(v: Optional[str]) -> bool:
    return v is None or not v.strip()


def _as_int(v: Any) -> Optional[int]:
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, str) and v.strip().isdigit():
        return int(v.strip())
    return None


def _is_empty_list(v: Any) -> bool:
    return v is None or v == "" or v == []


def _is_false(v: Any) -> bool:
    return v is False or (isinstance(v, str) and v.strip() == "false")


def _task_summary(task: TaskBlock) -> dict[str, Any]:
    return {
        "name": task.name if not _is_blank(task.name) else "unnamed",
        "type": task.type,
        "has_files": task.files is not None,
        "has_action": not _is_blank(task.action),
        "has_verify": task.verify is not None,
        "has_done": task.done is not None,
    }


def _check_task(task: TaskBlock, errors: list[str], warnings: list[str]) -> None:
    n = task.index
    if _is_blank(task.name):
        errors.append(f"Task missing <name> element (task {n})")
    if _is_blank(task.action):
        errors.append(f"Task {n} missing <action>")

    if task.verify is None:
        warnings.append(f"Task {n} missing <verify>")
    elif _is_blank(task.verify.automated) and _is_blank(task.verify.human):
        errors.append(f"Task {n} <verify> has no <automated> or <human> check")

    if task.done is None:
        warnings.append(f"Task {n} missing <done>")
    if task.files is None:
        warnings.append(f"Task {n} missing <files>")

    if task.type is None:
        warnings.append(f"Task {n} has no type attribute")
    elif task.type != "auto" and not task.type.startswith(CHECKPOINT_PREFIX + ":"):
        warnings.append(f"Task {n} has unknown type: {task.type}")


def validate_plan_document(doc: Document) -> PlanStructureReport:
    """Apply frontmatter and task-block rules to one parsed plan.

    Errors make the plan invalid; warnings never do.
    """
    fm: dict[str, Any] = doc.frontmatter or {}
    errors: list[str] = []
    warnings: list[str] = []

    for name in REQUIRED_FIELDS:
        if name not in fm:
            errors.append(f"Missing required frontmatter field: {name}")

    for task in doc.tasks:
        _check_task(task, errors, warnings)
    if not doc.tasks:
        warnings.append("No <task> elements found")

    wave: Optional[int] = None
    if "wave" in fm:
        wave = _as_int(fm.get("wave"))
        if wave is None or wave < 1:
            errors.append(f"wave must be a positive integer, got: {fm.get('wave')!r}")
            wave = None

    if wave is not None and wave > 1 and _is_empty_list(fm.get("depends_on")):
        warnings.append("Wave > 1 but depends_on is empty")

    if "must_haves" in fm:
        must_haves = fm.get("must_haves")
        truths = must_haves.get("truths") if isinstance(must_haves, dict) else None
        if not isinstance(truths, list) or not [t for t in truths if t]:
            warnings.append("must_haves.truths is empty")

    has_checkpoint = any(t.type and t.type.startswith(CHECKPOINT_PREFIX) for t in doc.tasks)
    if has_checkpoint and not _is_false(fm.get("autonomous")):
        errors.append("Contains checkpoint tasks but autonomous is not false")

    return PlanStructureReport(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        task_count=len(doc.tasks),
        tasks=[_task_summary(t) for t in doc.tasks],
        frontmatter_fields=list(fm.keys()),
    )


def verify_plan_structure(
    project: Project, path: str | Path
) -> Union[PlanStructureReport, ErrorReport]:
    try:
        doc = load_document(project.resolve(path))
    except PlanningLoadError as e:
        if e.code == "E_FILE_NOT_FOUND":
            return ErrorReport(error=f"File not found: {path}", code=e.code)
        logger.warning("%s", e)
        return e.to_report()

    report = validate_plan_document(doc)
    logger.debug(
        "%s: %d error(s), %d warning(s)", path, len(report.errors), len(report.warnings)
    )
    return report
