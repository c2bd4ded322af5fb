"""Milestone completion.

A best-effort sequence of independent steps, each reporting its own outcome:

1. snapshot ROADMAP.md            -> milestones/<version>-ROADMAP.md
2. snapshot REQUIREMENTS.md       -> milestones/<version>-REQUIREMENTS.md (with header)
3. optionally move phase dirs     -> milestones/<version>-phases/
4. collect summary one-liners as accomplishments
5. append a section to MILESTONES.md
6. rewrite Status / Last Activity fields in STATE.md

Nothing is rolled back. A re-run after a crash may rewrite an archive file but
never leaves a half-written one behind.
"""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Union

from planning_toolkit.core.errors import PlanningLoadError
from planning_toolkit.core.io.load_document import load_document
from planning_toolkit.core.io.project import Project, replace_state_field
from planning_toolkit.core.model import ErrorReport, MilestoneRecord, PhaseDir
from planning_toolkit.core.tree.phase_tree import TreeCounts, scan_phases, tree_counts


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchiveFlags:
    roadmap: bool = False
    requirements: bool = False
    phases: bool = False


@dataclass(frozen=True)
class MilestoneReport:
    version: str
    name: str
    date: str
    phases: int
    plans: int
    tasks: int
    archived: ArchiveFlags
    milestones_updated: bool
    state_updated: bool
    accomplishments: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "name": self.name,
            "date": self.date,
            "phases": self.phases,
            "plans": self.plans,
            "tasks": self.tasks,
            "accomplishments": list(self.accomplishments),
            "archived": {
                "roadmap": self.archived.roadmap,
                "requirements": self.archived.requirements,
                "phases": self.archived.phases,
            },
            "milestones_updated": self.milestones_updated,
            "state_updated": self.state_updated,
        }


def collect_accomplishments(phases: list[PhaseDir]) -> list[str]:
    out: list[str] = []
    for phase in phases:
        for summary in phase.summary_files:
            try:
                fm = load_document(summary).frontmatter or {}
            except PlanningLoadError as e:
                logger.warning("skipping unreadable summary: %s", e)
                continue
            one_liner = fm.get("one-liner")
            if isinstance(one_liner, str) and one_liner.strip():
                out.append(one_liner.strip())
    return out


def render_requirements_archive(version: str, name: str, today: str, original: str) -> str:
    header = (
        f"# Requirements Archive: {version} {name}\n"
        "\n"
        f"**Archived:** {today}\n"
        "**Status:** SHIPPED\n"
        "\n"
        "For current requirements, see `.planning/REQUIREMENTS.md`.\n"
        "\n"
        "---\n"
    )
    return header + "\n" + original


def render_milestone_entry(record: MilestoneRecord, counts: TreeCounts) -> str:
    lines = [
        f"## {record.version} {record.name} (Shipped: {record.date})",
        "",
        f"**Phases completed:** {counts.phases} phases, {counts.plans} plans, {counts.tasks} tasks",
        "",
        "**Key accomplishments:**",
    ]
    lines.extend(f"- {a}" for a in record.accomplishments)
    lines.extend(["", "---", "", ""])
    return "\n".join(lines)


def _archive_roadmap(project: Project, version: str) -> bool:
    if not project.roadmap.is_file():
        logger.debug("no ROADMAP.md to archive")
        return False
    dest = project.milestones_dir / f"{version}-ROADMAP.md"
    shutil.copyfile(project.roadmap, dest)
    logger.info("archived roadmap to %s", dest)
    return True


def _archive_requirements(project: Project, version: str, name: str, today: str) -> bool:
    if not project.requirements.is_file():
        logger.debug("no REQUIREMENTS.md to archive")
        return False
    original = project.requirements.read_text(encoding="utf-8")
    dest = project.milestones_dir / f"{version}-REQUIREMENTS.md"
    dest.write_text(render_requirements_archive(version, name, today, original), encoding="utf-8")
    logger.info("archived requirements to %s", dest)
    return True


def _archive_phases(project: Project, version: str) -> bool:
    src = project.phases_dir
    entries = sorted(src.iterdir()) if src.is_dir() else []
    if not entries:
        logger.debug("no phase directories to archive")
        return False

    dest = project.milestones_dir / f"{version}-phases"
    dest.mkdir(parents=True, exist_ok=True)
    moved = 0
    for entry in entries:
        target = dest / entry.name
        if target.exists():
            logger.warning("not moving %s: %s already exists", entry.name, target)
            continue
        shutil.move(str(entry), str(target))
        moved += 1

    logger.info("moved %d phase entr%s to %s", moved, "y" if moved == 1 else "ies", dest)
    left = list(src.iterdir())
    if left:
        logger.warning("%d entr%s left in %s", len(left), "y" if len(left) == 1 else "ies", src)
        return False
    src.rmdir()
    return moved > 0


def _append_milestone(project: Project, record: MilestoneRecord, counts: TreeCounts) -> bool:
    entry = render_milestone_entry(record, counts)
    path = project.milestones_file
    if path.is_file():
        existing = path.read_text(encoding="utf-8")
        path.write_text(existing + "\n" + entry, encoding="utf-8")
    else:
        path.write_text(f"# {project.config.milestones_title}\n\n{entry}", encoding="utf-8")
    logger.info("recorded %s %s in %s", record.version, record.name, path.name)
    return True


def _update_state(project: Project, version: str, today: str) -> bool:
    path = project.state
    if not path.is_file():
        logger.debug("no STATE.md to update")
        return False
    content = path.read_text(encoding="utf-8")
    content, _ = replace_state_field(content, "Status", f"{version} milestone complete")
    content, _ = replace_state_field(content, "Last Activity", today)
    content, _ = replace_state_field(
        content, "Last Activity Description", f"{version} milestone completed and archived"
    )
    path.write_text(content, encoding="utf-8")
    return True


def complete_milestone(
    project: Project,
    version: str,
    name: Optional[str] = None,
    archive_phases: Optional[bool] = None,
    today: Optional[str] = None,
) -> Union[MilestoneReport, ErrorReport]:
    version = (version or "").strip()
    if not version:
        return ErrorReport(error="version required for milestone complete", code="E_VERSION_REQUIRED")
    name = (name or "").strip() or version
    today = today or date.today().isoformat()
    if archive_phases is None:
        archive_phases = project.config.archive_phases

    # Read the tree before anything moves.
    phases = scan_phases(project.phases_dir)
    counts = tree_counts(phases)
    record = MilestoneRecord(
        version=version, name=name, date=today, accomplishments=collect_accomplishments(phases)
    )

    project.milestones_dir.mkdir(parents=True, exist_ok=True)
    archived = ArchiveFlags(
        roadmap=_archive_roadmap(project, version),
        requirements=_archive_requirements(project, version, name, today),
        phases=_archive_phases(project, version) if archive_phases else False,
    )
    milestones_updated = _append_milestone(project, record, counts)
    state_updated = _update_state(project, version, today)

    return MilestoneReport(
        version=version,
        name=name,
        date=today,
        phases=counts.phases,
        plans=counts.plans,
        tasks=counts.tasks,
        archived=archived,
        milestones_updated=milestones_updated,
        state_updated=state_updated,
        accomplishments=list(record.accomplishments),
    )
