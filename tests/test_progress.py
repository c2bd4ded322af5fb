from planning_toolkit.core.check.progress import build_progress, phase_status
from planning_toolkit.core.io.project import Project


def test_phase_status():
    assert phase_status(0, 0) == "Pending"
    assert phase_status(2, 0) == "Planned"
    assert phase_status(2, 1) == "In Progress"
    assert phase_status(2, 2) == "Complete"
    assert phase_status(0, 1) == "In Progress"


def test_progress_combines_roadmap_and_disk(tmp_path):
    planning = tmp_path / ".planning"
    p1 = planning / "phases" / "01-setup"
    p1.mkdir(parents=True)
    (planning / "ROADMAP.md").write_text(
        "# Roadmap\n### Phase 1: Setup\n### Phase 2: Build\n", encoding="utf-8"
    )
    (p1 / "01-01-PLAN.md").write_text("---\nwave: 1\n---\n", encoding="utf-8")
    (p1 / "01-02-PLAN.md").write_text("---\nwave: 1\n---\n", encoding="utf-8")
    (p1 / "01-01-SUMMARY.md").write_text("# s\n", encoding="utf-8")

    report = build_progress(Project(root=tmp_path)).to_dict()

    assert report["phases"] == [
        {"number": 1, "name": "01-setup", "plans": 2, "summaries": 1, "status": "In Progress"},
        {"number": 2, "name": "Build", "plans": 0, "summaries": 0, "status": "Pending"},
    ]
    assert report["total_plans"] == 2
    assert report["total_summaries"] == 1
    assert report["percent"] == 50


def test_progress_without_planning_dir(tmp_path):
    report = build_progress(Project(root=tmp_path))
    assert report.phases == []
    assert report.percent == 0
