from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from planning_toolkit.core.model import ErrorReport


@dataclass(frozen=True)
class PlanningError(Exception):
    """Error envelope for `.planning/` operations.

    `subject` names what the error is about inside the planning tree: a phase
    (``phase 03``), a requirement id, a config key or a CLI option.
    Operations hand these back as `ErrorReport` records via `to_report`.
    """

    code: str
    message: str
    file: Optional[str] = None
    subject: Optional[str] = None

    def __str__(self) -> str:
        where = self.file or ".planning"
        if self.subject:
            where = f"{where} [{self.subject}]"
        return f"{where}: {self.code}: {self.message}"

    def to_report(self) -> ErrorReport:
        return ErrorReport(error=self.message, code=self.code)


class PlanningLoadError(PlanningError):
    pass


class PlanningLookupError(PlanningError):
    """A phase or requirement named by the caller does not exist."""


class PlanningConfigError(PlanningError):
    pass
