"""Requirement ledger: REQUIREMENTS.md checklist + traceability table.

Each requirement appears twice: a checklist line ``- [ ] **ID**: text`` and a
table row ``| ID | Phase N | Pending |``. Mutations patch matching lines only;
every other line is written back verbatim.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from planning_toolkit.core.errors import PlanningLoadError
from planning_toolkit.core.io.load_document import read_text
from planning_toolkit.core.io.project import Project


logger = logging.getLogger(__name__)

REQ_ID = r"[A-Za-z][A-Za-z0-9]*-\d+"
CHECKLIST_RE = re.compile(rf"^(\s*-\s*\[)([ xX])(\]\s*\*\*)({REQ_ID})(\*\*.*)$")
TABLE_RE = re.compile(
    rf"^(\s*\|\s*)({REQ_ID})(\s*\|([^|]*)\|\s*)(Pending|Complete)(\s*\|.*)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class RequirementItem:
    id: str
    checked: Optional[bool] = None  # None: no checklist line
    phase: Optional[str] = None
    status: Optional[str] = None  # None: no table row


@dataclass(frozen=True)
class MarkCompleteResult:
    updated: bool
    marked_complete: list[str] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)
    total: int = 0
    reason: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        if self.reason is not None:
            return {"updated": self.updated, "reason": self.reason}
        return {
            "updated": self.updated,
            "marked_complete": list(self.marked_complete),
            "not_found": list(self.not_found),
            "total": self.total,
        }


def parse_requirement_ids(values: str | Iterable[str]) -> list[str]:
    """Accept ``A,B``, ``A B`` and ``[A, B]`` forms (or any mix across argv)."""
    raw = values if isinstance(values, str) else " ".join(values)
    raw = raw.replace("[", " ").replace("]", " ")
    return [part for part in re.split(r"[,\s]+", raw) if part]


def read_ledger(text: str) -> dict[str, RequirementItem]:
    """Index both representations by upper-cased requirement id."""
    checked: dict[str, bool] = {}
    rows: dict[str, tuple[str, str]] = {}
    order: list[str] = []
    for line in text.splitlines():
        m = CHECKLIST_RE.match(line)
        if m:
            key = m.group(4).upper()
            checked.setdefault(key, m.group(2) != " ")
            if key not in order:
                order.append(key)
            continue
        t = TABLE_RE.match(line)
        if t:
            key = t.group(2).upper()
            rows.setdefault(key, (t.group(4).strip(), t.group(5).capitalize()))
            if key not in order:
                order.append(key)

    out: dict[str, RequirementItem] = {}
    for key in order:
        phase, status = rows.get(key, (None, None))
        out[key] = RequirementItem(id=key, checked=checked.get(key), phase=phase, status=status)
    return out


def mark_complete_text(text: str, ids: list[str]) -> tuple[str, list[str], list[str]]:
    """Patch checklist + table lines for `ids`.

    Only an id whose checklist box is a literal ``[ ]`` transitions, so an id
    that is already ``[x]`` (or repeated in `ids`) lands in not_found. Table
    rows still flip Pending -> Complete for every requested id.
    """
    ledger = read_ledger(text)
    requested = {i.upper() for i in ids}

    marked: list[str] = []
    not_found: list[str] = []
    transition: set[str] = set()
    for req_id in ids:
        key = req_id.upper()
        item = ledger.get(key)
        if item is not None and item.checked is False and key not in transition:
            transition.add(key)
            marked.append(req_id)
        else:
            not_found.append(req_id)

    table_rows = {key for key in requested if key in ledger and ledger[key].status == "Pending"}

    lines = text.split("\n")
    for idx, line in enumerate(lines):
        m = CHECKLIST_RE.match(line)
        if m:
            if m.group(2) == " " and m.group(4).upper() in transition:
                lines[idx] = m.group(1) + "x" + m.group(3) + m.group(4) + m.group(5)
            continue
        t = TABLE_RE.match(line)
        if t and t.group(5).lower() == "pending" and t.group(2).upper() in table_rows:
            lines[idx] = t.group(1) + t.group(2) + t.group(3) + "Complete" + t.group(6)

    return "\n".join(lines), marked, not_found


def mark_requirements_complete(project: Project, ids: str | Iterable[str]) -> MarkCompleteResult:
    req_ids = parse_requirement_ids(ids)
    path = project.requirements
    if not path.is_file():
        logger.debug("requirements file missing: %s", path)
        return MarkCompleteResult(updated=False, reason="REQUIREMENTS.md not found")

    try:
        content = read_text(path)
    except PlanningLoadError as e:
        logger.warning("%s", e)
        return MarkCompleteResult(updated=False, reason=e.message)
    new_content, marked, not_found = mark_complete_text(content, req_ids)

    if marked:
        path.write_text(new_content, encoding="utf-8")
        logger.info("marked complete: %s", ", ".join(marked))
    if not_found:
        logger.info("no pending checklist line for: %s", ", ".join(not_found))

    return MarkCompleteResult(
        updated=bool(marked),
        marked_complete=marked,
        not_found=not_found,
        total=len(req_ids),
    )
