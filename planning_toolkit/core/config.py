from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from planning_toolkit.core.errors import PlanningConfigError


CONFIG_FILENAMES = ("config.yaml", "config.yml", "config.json")


@dataclass(frozen=True)
class PlanningConfig:
    phases_dir: str = "phases"
    milestones_dir: str = "milestones"
    archive_phases: bool = False
    milestones_title: str = "Milestones"


DEFAULT_CONFIG = PlanningConfig()


def find_config_file(planning_dir: str | Path) -> Path | None:
    base = Path(planning_dir)
    for name in CONFIG_FILENAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def load_config_file(path: str | Path) -> PlanningConfig:
    """Load a config file.

    Format (every key optional):
      phases_dir: phases
      milestones_dir: milestones
      archive_phases: false
      milestones_title: Milestones
    """
    p = Path(path)
    try:
        raw_text = p.read_text(encoding="utf-8")
        if p.suffix.lower() == ".json":
            raw = json.loads(raw_text)
        else:
            raw = yaml.safe_load(raw_text)
    except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise PlanningConfigError(code="E_CONFIG_PARSE", message=str(e), file=str(p)) from e

    if raw is None:
        return DEFAULT_CONFIG
    if not isinstance(raw, dict):
        raise PlanningConfigError(
            code="E_CONFIG_INVALID",
            message="config file must be a mapping",
            file=str(p),
        )

    values: dict[str, Any] = {}
    for key in ("phases_dir", "milestones_dir", "milestones_title"):
        if key not in raw:
            continue
        v = raw[key]
        if not isinstance(v, str) or not v.strip():
            raise PlanningConfigError(
                code="E_CONFIG_INVALID",
                message=f"{key} must be a non-empty string",
                file=str(p),
                subject=key,
            )
        values[key] = v.strip()

    if "archive_phases" in raw:
        v = raw["archive_phases"]
        if not isinstance(v, bool):
            raise PlanningConfigError(
                code="E_CONFIG_INVALID",
                message="archive_phases must be a boolean",
                file=str(p),
                subject="archive_phases",
            )
        values["archive_phases"] = v

    return PlanningConfig(**values)


def load_config(planning_dir: str | Path) -> PlanningConfig:
    found = find_config_file(planning_dir)
    if found is None:
        return DEFAULT_CONFIG
    return load_config_file(found)
