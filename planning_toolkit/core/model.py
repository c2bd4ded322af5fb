from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


@dataclass(frozen=True)
class VerifyBlock:
    automated: Optional[str] = None
    human: Optional[str] = None


@dataclass(frozen=True)
class TaskBlock:
    index: int  # 1-based position in the document
    type: Optional[str]
    name: Optional[str]
    action: Optional[str]
    verify: Optional[VerifyBlock]
    done: Optional[str]
    files: Optional[str]


@dataclass(frozen=True)
class Document:
    frontmatter: Optional[dict[str, Any]]
    body: str
    tasks: list[TaskBlock]
    file: Optional[str] = None


@dataclass(frozen=True)
class PlanSummaryPair:
    plan_id: str  # NN-MM
    has_plan: bool
    has_summary: bool


@dataclass(frozen=True)
class PhaseDir:
    number: int
    slug: str
    path: Path
    pairs: list[PlanSummaryPair]
    plan_files: list[Path]
    summary_files: list[Path]

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class PhaseRecord:
    number: int
    slug: Optional[str]
    on_disk_path: Optional[Path]
    declared_in_roadmap: bool
    title: Optional[str] = None


@dataclass(frozen=True)
class MilestoneRecord:
    version: str
    name: str
    date: str
    accomplishments: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ErrorReport:
    """Structural fault: the command's required input is missing."""

    error: str
    code: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error, "code": self.code}
