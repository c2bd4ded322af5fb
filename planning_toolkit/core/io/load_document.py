from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from planning_toolkit.core.errors import PlanningLoadError
from planning_toolkit.core.io.frontmatter import parse_frontmatter
from planning_toolkit.core.model import Document, TaskBlock, VerifyBlock


# <task ...> but not <tasks>
TASK_RE = re.compile(r"<task(?:\s+([^>]*))?>(.*?)</task>", re.DOTALL)
ATTR_RE = re.compile(r"([\w:-]+)\s*=\s*[\"']([^\"']*)[\"']")


def _element(content: str, tag: str) -> Optional[str]:
    m = re.search(rf"<{tag}(?:\s[^>]*)?>(.*?)</{tag}>", content, re.DOTALL)
    if m:
        return m.group(1).strip()
    if re.search(rf"<{tag}(?:\s[^>]*)?/>", content):
        return ""
    return None


def parse_task_blocks(body: str) -> list[TaskBlock]:
    """Extract <task> regions. Absent child elements are None; judging them is the validator's job."""
    tasks: list[TaskBlock] = []
    for i, m in enumerate(TASK_RE.finditer(body), start=1):
        attrs = dict(ATTR_RE.findall(m.group(1) or ""))
        content = m.group(2)

        verify_raw = _element(content, "verify")
        verify: Optional[VerifyBlock] = None
        if verify_raw is not None:
            verify = VerifyBlock(
                automated=_element(verify_raw, "automated"),
                human=_element(verify_raw, "human"),
            )

        tasks.append(
            TaskBlock(
                index=i,
                type=attrs.get("type"),
                name=_element(content, "name"),
                action=_element(content, "action"),
                verify=verify,
                done=_element(content, "done"),
                files=_element(content, "files"),
            )
        )
    return tasks


def parse_document(text: str, file: Optional[str] = None) -> Document:
    """Split raw text into frontmatter, body and task blocks.

    Fails soft: a document without frontmatter yields frontmatter=None and the
    whole text as body.
    """
    frontmatter, body = parse_frontmatter(text)
    return Document(frontmatter=frontmatter, body=body, tasks=parse_task_blocks(body), file=file)


def read_text(path: str | Path) -> str:
    p = Path(path)
    if not p.is_file():
        raise PlanningLoadError(
            code="E_FILE_NOT_FOUND",
            message=f"File not found: {path}",
            file=str(path),
        )
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PlanningLoadError(
            code="E_FILE_READ",
            message=f"Cannot read {path}: {e}",
            file=str(path),
        ) from e


def load_document(path: str | Path) -> Document:
    return parse_document(read_text(path), file=str(path))
