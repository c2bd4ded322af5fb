from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

from planning_toolkit.core.config import DEFAULT_CONFIG, PlanningConfig, load_config


PLANNING_DIRNAME = ".planning"


@dataclass(frozen=True)
class Project:
    root: Path
    config: PlanningConfig = DEFAULT_CONFIG

    @property
    def planning_dir(self) -> Path:
        return self.root / PLANNING_DIRNAME

    @property
    def roadmap(self) -> Path:
        return self.planning_dir / "ROADMAP.md"

    @property
    def requirements(self) -> Path:
        return self.planning_dir / "REQUIREMENTS.md"

    @property
    def state(self) -> Path:
        return self.planning_dir / "STATE.md"

    @property
    def milestones_file(self) -> Path:
        return self.planning_dir / "MILESTONES.md"

    @property
    def phases_dir(self) -> Path:
        return self.planning_dir / self.config.phases_dir

    @property
    def milestones_dir(self) -> Path:
        return self.planning_dir / self.config.milestones_dir

    def resolve(self, path: str | Path) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self.root / p


def open_project(root: str | Path | None = None) -> Project:
    """Project rooted at `root` (default: cwd), with .planning/config.* applied."""
    base = Path(root or os.getcwd())
    return Project(root=base, config=load_config(base / PLANNING_DIRNAME))


def replace_state_field(content: str, field: str, value: str) -> tuple[str, bool]:
    """Rewrite a ``**Field:** value`` line in place. Returns (content, replaced)."""
    pattern = re.compile(rf"^(\*\*{re.escape(field)}:\*\*[ \t]*).*$", re.MULTILINE)
    new_content, n = pattern.subn(lambda m: m.group(1) + value, content, count=1)
    return new_content, n > 0
