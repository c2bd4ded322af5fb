from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Union

from planning_toolkit.core.errors import PlanningLoadError
from planning_toolkit.core.io.load_document import load_document
from planning_toolkit.core.io.project import Project
from planning_toolkit.core.model import ErrorReport, PhaseDir
from planning_toolkit.core.tree.phase_tree import build_inventory, parse_roadmap_phases, scan_phases


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConsistencyReport:
    warnings: list[str]

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def passed(self) -> bool:
        return self.warning_count == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "warning_count": self.warning_count,
            "warnings": list(self.warnings),
        }


def numbering_gaps(numbers: list[int]) -> list[str]:
    """Compare sorted numbers against the contiguous range 1..max."""
    ordered = sorted(set(numbers))
    out: list[str] = []
    if ordered and ordered[0] > 1:
        out.append(f"Gap in phase numbering before {ordered[0]} (numbering starts at 1)")
    for prev, cur in zip(ordered, ordered[1:]):
        if cur != prev + 1:
            out.append(f"Gap in phase numbering between {prev} and {cur}")
    return out


def _plan_warnings(phase: PhaseDir) -> list[str]:
    out: list[str] = []

    plan_numbers = sorted(
        int(pair.plan_id.split("-")[1]) for pair in phase.pairs if pair.has_plan
    )
    for prev, cur in zip(plan_numbers, plan_numbers[1:]):
        if cur != prev + 1:
            out.append(f"Gap in plan numbering in {phase.name} between {prev} and {cur}")

    for pair in phase.pairs:
        if pair.has_summary and not pair.has_plan:
            out.append(f"Summary {pair.plan_id}-SUMMARY.md in {phase.name} has no matching plan")

    for plan_file in phase.plan_files:
        try:
            fm = load_document(plan_file).frontmatter or {}
        except PlanningLoadError as e:
            logger.warning("skipping unreadable plan: %s", e)
            continue
        if "wave" not in fm:
            out.append(f"{phase.name}/{plan_file.name}: missing 'wave' in frontmatter")
    return out


def check_consistency(project: Project) -> Union[ConsistencyReport, ErrorReport]:
    """Cross-reference ROADMAP.md phase headings against phase directories.

    Every finding is advisory; only a missing roadmap is reported as an error record.
    """
    if not project.roadmap.is_file():
        return ErrorReport(error="ROADMAP.md not found", code="E_FILE_NOT_FOUND")

    declared = parse_roadmap_phases(project.roadmap.read_text(encoding="utf-8"))
    on_disk = scan_phases(project.phases_dir)
    inventory = build_inventory(declared, on_disk)

    warnings: list[str] = []
    for record in inventory:
        if record.on_disk_path is not None and not record.declared_in_roadmap:
            warnings.append(f"Phase {record.on_disk_path.name} on disk but not in ROADMAP")
        elif record.on_disk_path is None:
            warnings.append(f"Phase {record.number} in ROADMAP but no directory on disk")

    warnings.extend(numbering_gaps([number for number, _ in declared]))

    for phase in on_disk:
        warnings.extend(_plan_warnings(phase))

    logger.debug("consistency: %d phase record(s), %d warning(s)", len(inventory), len(warnings))
    return ConsistencyReport(warnings=warnings)
