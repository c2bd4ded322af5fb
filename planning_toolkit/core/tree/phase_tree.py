from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from planning_toolkit.core.errors import PlanningLoadError
from planning_toolkit.core.io.load_document import load_document
from planning_toolkit.core.model import PhaseDir, PhaseRecord, PlanSummaryPair


logger = logging.getLogger(__name__)

PHASE_DIR_RE = re.compile(r"^(\d+)-(.+)$")
PLAN_FILE_RE = re.compile(r"^(\d+-\d+)-PLAN\.md$")
SUMMARY_FILE_RE = re.compile(r"^(\d+-\d+)-SUMMARY\.md$")
ROADMAP_PHASE_RE = re.compile(r"^#{2,4}[ \t]*Phase[ \t]+(\d+)[ \t]*:[ \t]*(.*?)[ \t]*$", re.MULTILINE)


@dataclass(frozen=True)
class TreeCounts:
    phases: int
    plans: int
    summaries: int
    tasks: int


def parse_phase_dir_name(name: str) -> Optional[tuple[int, str]]:
    m = PHASE_DIR_RE.match(name)
    if not m:
        return None
    number = int(m.group(1))
    if number < 1:
        return None
    return number, m.group(2)


def parse_roadmap_phases(text: str) -> list[tuple[int, str]]:
    """``### Phase N: Title`` headings in document order."""
    out: list[tuple[int, str]] = []
    for m in ROADMAP_PHASE_RE.finditer(text):
        number = int(m.group(1))
        if number >= 1:
            out.append((number, m.group(2).strip()))
    return out


def _pair_files(files: list[Path]) -> tuple[list[PlanSummaryPair], list[Path], list[Path]]:
    plans: dict[str, Path] = {}
    summaries: dict[str, Path] = {}
    for f in files:
        pm = PLAN_FILE_RE.match(f.name)
        if pm:
            plans[pm.group(1)] = f
            continue
        sm = SUMMARY_FILE_RE.match(f.name)
        if sm:
            summaries[sm.group(1)] = f

    pairs = [
        PlanSummaryPair(plan_id=pid, has_plan=pid in plans, has_summary=pid in summaries)
        for pid in sorted(set(plans) | set(summaries))
    ]
    return pairs, [plans[k] for k in sorted(plans)], [summaries[k] for k in sorted(summaries)]


def read_phase_dir(path: Path) -> Optional[PhaseDir]:
    parsed = parse_phase_dir_name(path.name)
    if parsed is None or not path.is_dir():
        return None
    files = sorted(p for p in path.iterdir() if p.is_file())
    pairs, plan_files, summary_files = _pair_files(files)
    return PhaseDir(
        number=parsed[0],
        slug=parsed[1],
        path=path,
        pairs=pairs,
        plan_files=plan_files,
        summary_files=summary_files,
    )


def scan_phases(phases_dir: Path) -> list[PhaseDir]:
    """Phase directories sorted by (number, name). Missing root -> []."""
    if not phases_dir.is_dir():
        logger.debug("phases directory missing: %s", phases_dir)
        return []
    out: list[PhaseDir] = []
    for child in phases_dir.iterdir():
        phase = read_phase_dir(child)
        if phase is not None:
            out.append(phase)
        elif child.is_dir():
            logger.debug("ignoring non-phase directory: %s", child.name)
    return sorted(out, key=lambda p: (p.number, p.name))


def find_phase(phases_dir: Path, phase: str) -> Optional[PhaseDir]:
    """Look up a phase by number (``1``, ``01``) or directory name (``01-setup``)."""
    query = phase.strip()
    m = re.match(r"^(\d+)", query)
    if not m:
        return None
    number = int(m.group(1))
    candidates = [p for p in scan_phases(phases_dir) if p.number == number]
    for p in candidates:
        if p.name == query:
            return p
    return candidates[0] if candidates else None


def count_tasks(plan_files: list[Path]) -> int:
    total = 0
    for f in plan_files:
        try:
            total += len(load_document(f).tasks)
        except PlanningLoadError as e:
            logger.warning("skipping unreadable plan: %s", e)
    return total


def tree_counts(phases: list[PhaseDir]) -> TreeCounts:
    return TreeCounts(
        phases=len(phases),
        plans=sum(len(p.plan_files) for p in phases),
        summaries=sum(len(p.summary_files) for p in phases),
        tasks=sum(count_tasks(p.plan_files) for p in phases),
    )


def build_inventory(declared: list[tuple[int, str]], on_disk: list[PhaseDir]) -> list[PhaseRecord]:
    """Union of roadmap-declared phases and phase directories, ordered by number."""
    titles: dict[int, str] = {}
    for number, title in declared:
        titles.setdefault(number, title)

    records: list[PhaseRecord] = []
    seen: set[int] = set()
    for p in on_disk:
        records.append(
            PhaseRecord(
                number=p.number,
                slug=p.slug,
                on_disk_path=p.path,
                declared_in_roadmap=p.number in titles,
                title=titles.get(p.number),
            )
        )
        seen.add(p.number)
    for number, title in titles.items():
        if number not in seen:
            records.append(
                PhaseRecord(
                    number=number,
                    slug=None,
                    on_disk_path=None,
                    declared_in_roadmap=True,
                    title=title,
                )
            )
    return sorted(records, key=lambda r: (r.number, r.slug or ""))
