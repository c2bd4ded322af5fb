from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from planning_toolkit.core.io.project import Project
from planning_toolkit.core.model import PhaseDir
from planning_toolkit.core.tree.phase_tree import (
    build_inventory,
    parse_roadmap_phases,
    scan_phases,
    tree_counts,
)


@dataclass(frozen=True)
class PhaseProgress:
    number: int
    name: str
    plans: int
    summaries: int
    status: str


@dataclass(frozen=True)
class ProgressReport:
    phases: list[PhaseProgress]
    total_plans: int
    total_summaries: int
    total_tasks: int

    @property
    def percent(self) -> int:
        if self.total_plans == 0:
            return 0
        return min(100, self.total_summaries * 100 // self.total_plans)

    def to_dict(self) -> dict[str, Any]:
        return {
            "phases": [
                {
                    "number": p.number,
                    "name": p.name,
                    "plans": p.plans,
                    "summaries": p.summaries,
                    "status": p.status,
                }
                for p in self.phases
            ],
            "total_plans": self.total_plans,
            "total_summaries": self.total_summaries,
            "total_tasks": self.total_tasks,
            "percent": self.percent,
        }


def phase_status(plans: int, summaries: int) -> str:
    if plans > 0 and summaries >= plans:
        return "Complete"
    if summaries > 0:
        return "In Progress"
    if plans > 0:
        return "Planned"
    return "Pending"


def build_progress(project: Project) -> ProgressReport:
    on_disk = scan_phases(project.phases_dir)
    declared = (
        parse_roadmap_phases(project.roadmap.read_text(encoding="utf-8"))
        if project.roadmap.is_file()
        else []
    )
    by_path: dict[str, PhaseDir] = {str(p.path): p for p in on_disk}

    rows: list[PhaseProgress] = []
    for record in build_inventory(declared, on_disk):
        phase = by_path.get(str(record.on_disk_path)) if record.on_disk_path else None
        plans = len(phase.plan_files) if phase else 0
        summaries = len(phase.summary_files) if phase else 0
        rows.append(
            PhaseProgress(
                number=record.number,
                name=phase.name if phase else (record.title or f"Phase {record.number}"),
                plans=plans,
                summaries=summaries,
                status=phase_status(plans, summaries),
            )
        )

    counts = tree_counts(on_disk)
    return ProgressReport(
        phases=rows,
        total_plans=counts.plans,
        total_summaries=counts.summaries,
        total_tasks=counts.tasks,
    )
