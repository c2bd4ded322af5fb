from pathlib import Path

from planning_toolkit.core.check.consistency import check_consistency, numbering_gaps
from planning_toolkit.core.io.project import Project
from planning_toolkit.core.model import ErrorReport


def _project(tmp_path: Path, roadmap: str | None, dirs: list[str]) -> Project:
    planning = tmp_path / ".planning"
    (planning / "phases").mkdir(parents=True)
    if roadmap is not None:
        (planning / "ROADMAP.md").write_text(roadmap, encoding="utf-8")
    for d in dirs:
        (planning / "phases" / d).mkdir()
    return Project(root=tmp_path)


def test_consistent_project_passes(tmp_path):
    project = _project(
        tmp_path, "# Roadmap\n### Phase 1: A\n### Phase 2: B\n### Phase 3: C\n", ["01-a", "02-b", "03-c"]
    )
    report = check_consistency(project)
    assert report.to_dict() == {"passed": True, "warning_count": 0, "warnings": []}


def test_orphan_directory_warns(tmp_path):
    project = _project(tmp_path, "# Roadmap\n### Phase 1: A\n", ["01-a", "02-orphan"])
    report = check_consistency(project)
    assert report.passed is False
    assert "Phase 02-orphan on disk but not in ROADMAP" in report.warnings


def test_gap_in_declared_numbering(tmp_path):
    project = _project(tmp_path, "# Roadmap\n### Phase 1: A\n### Phase 3: C\n", ["01-a", "03-c"])
    report = check_consistency(project)
    assert report.warnings == ["Gap in phase numbering between 1 and 3"]


def test_gap_comes_from_roadmap_not_directories(tmp_path):
    project = _project(tmp_path, "# Roadmap\n### Phase 1: A\n### Phase 2: B\n", ["01-a", "02-b"])
    report = check_consistency(project)
    assert not any("Gap" in w for w in report.warnings)


def test_declared_phase_without_directory(tmp_path):
    project = _project(tmp_path, "# Roadmap\n### Phase 1: A\n### Phase 2: B\n", ["01-a"])
    report = check_consistency(project)
    assert report.warnings == ["Phase 2 in ROADMAP but no directory on disk"]


def test_plan_level_findings(tmp_path):
    project = _project(tmp_path, "# Roadmap\n### Phase 1: A\n", ["01-a"])
    phase = tmp_path / ".planning" / "phases" / "01-a"
    (phase / "01-01-PLAN.md").write_text("---\nwave: 1\n---\n", encoding="utf-8")
    (phase / "01-03-PLAN.md").write_text("---\nplan: 03\n---\n", encoding="utf-8")
    (phase / "01-04-SUMMARY.md").write_text("# Summary\n", encoding="utf-8")

    warnings = check_consistency(project).warnings
    assert "Gap in plan numbering in 01-a between 1 and 3" in warnings
    assert "Summary 01-04-SUMMARY.md in 01-a has no matching plan" in warnings
    assert "01-a/01-03-PLAN.md: missing 'wave' in frontmatter" in warnings
    assert len(warnings) == 3


def test_missing_roadmap_is_an_error_record(tmp_path):
    result = check_consistency(_project(tmp_path, None, []))
    assert isinstance(result, ErrorReport)
    assert result.error == "ROADMAP.md not found"


def test_numbering_gaps():
    assert numbering_gaps([1, 2, 3]) == []
    assert numbering_gaps([3, 1]) == ["Gap in phase numbering between 1 and 3"]
    assert numbering_gaps([1, 1, 2]) == []
    assert numbering_gaps([2, 3]) == ["Gap in phase numbering before 2 (numbering starts at 1)"]
    assert numbering_gaps([]) == []


def test_undecodable_plan_is_skipped(tmp_path):
    project = _project(tmp_path, "# Roadmap\n### Phase 1: A\n", ["01-a"])
    phase = tmp_path / ".planning" / "phases" / "01-a"
    (phase / "01-01-PLAN.md").write_text("---\nwave: 1\n---\n", encoding="utf-8")
    (phase / "01-02-PLAN.md").write_bytes(b"---\n\xff\xfe\n---\n")

    report = check_consistency(project)
    assert report.warnings == []
