from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Union

from planning_toolkit.core.errors import PlanningLookupError
from planning_toolkit.core.io.project import Project
from planning_toolkit.core.model import ErrorReport
from planning_toolkit.core.tree.phase_tree import find_phase


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletenessReport:
    phase: str
    plan_count: int
    summary_count: int
    incomplete_plans: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.incomplete_plans

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "complete": self.complete,
            "plan_count": self.plan_count,
            "summary_count": self.summary_count,
            "incomplete_plans": list(self.incomplete_plans),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


def check_phase_completeness(project: Project, phase: str) -> Union[CompletenessReport, ErrorReport]:
    """Every NN-MM-PLAN.md in the phase needs a matching NN-MM-SUMMARY.md."""
    found = find_phase(project.phases_dir, phase)
    if found is None:
        err = PlanningLookupError(
            code="E_PHASE_NOT_FOUND",
            message=f"Phase not found: {phase}",
            file=str(project.phases_dir),
            subject=f"phase {phase}",
        )
        logger.info("%s", err)
        return err.to_report()

    incomplete = [p.plan_id for p in found.pairs if p.has_plan and not p.has_summary]
    orphans = [p.plan_id for p in found.pairs if p.has_summary and not p.has_plan]

    errors: list[str] = []
    warnings: list[str] = []
    if incomplete:
        errors.append(f"Plans without summaries: {', '.join(incomplete)}")
    if orphans:
        warnings.append(f"Summaries without plans: {', '.join(orphans)}")

    logger.debug("%s: %d incomplete, %d orphan summaries", found.name, len(incomplete), len(orphans))
    return CompletenessReport(
        phase=found.name,
        plan_count=len(found.plan_files),
        summary_count=len(found.summary_files),
        incomplete_plans=incomplete,
        errors=errors,
        warnings=warnings,
    )
