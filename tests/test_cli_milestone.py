import json

from typer.testing import CliRunner

from planning_toolkit.cli import app

runner = CliRunner()


def _setup(tmp_path):
    planning = tmp_path / ".planning"
    phase = planning / "phases" / "01-foundation"
    phase.mkdir(parents=True)
    (planning / "ROADMAP.md").write_text(
        "# Roadmap v1.0 MVP\n\n### Phase 1: Foundation\n**Goal:** Setup\n", encoding="utf-8"
    )
    (phase / "01-01-SUMMARY.md").write_text(
        "---\none-liner: Set up project infrastructure\n---\n# Summary\n", encoding="utf-8"
    )
    return planning


def test_cli_milestone_complete_end_to_end(tmp_path):
    planning = _setup(tmp_path)
    r = runner.invoke(
        app, ["--cwd", str(tmp_path), "milestone", "complete", "v1.0", "--name", "MVP Foundation"]
    )
    assert r.exit_code == 0, r.stdout
    payload = json.loads(r.stdout)
    assert payload["version"] == "v1.0"
    assert payload["phases"] == 1
    assert payload["archived"]["roadmap"] is True
    assert payload["archived"]["requirements"] is False
    assert payload["state_updated"] is False

    assert (planning / "milestones" / "v1.0-ROADMAP.md").is_file()
    assert not (planning / "milestones" / "v1.0-REQUIREMENTS.md").exists()
    milestones = (planning / "MILESTONES.md").read_text(encoding="utf-8")
    assert "v1.0 MVP Foundation" in milestones
    assert "Set up project infrastructure" in milestones


def test_cli_milestone_complete_archive_phases(tmp_path):
    planning = _setup(tmp_path)
    r = runner.invoke(
        app,
        ["--cwd", str(tmp_path), "milestone", "complete", "v1.0", "--name", "MVP", "--archive-phases"],
    )
    assert r.exit_code == 0
    assert json.loads(r.stdout)["archived"]["phases"] is True
    assert (planning / "milestones" / "v1.0-phases" / "01-foundation").is_dir()
    assert not (planning / "phases" / "01-foundation").exists()


def test_cli_milestone_config_default_can_be_overridden(tmp_path):
    planning = _setup(tmp_path)
    (planning / "config.json").write_text('{"archive_phases": true}', encoding="utf-8")

    r = runner.invoke(
        app, ["--cwd", str(tmp_path), "milestone", "complete", "v1.0", "--no-archive-phases"]
    )
    assert r.exit_code == 0
    assert json.loads(r.stdout)["archived"]["phases"] is False
    assert (planning / "phases" / "01-foundation").is_dir()


def test_cli_bad_config_exits_2(tmp_path):
    planning = _setup(tmp_path)
    (planning / "config.yaml").write_text("archive_phases: sometimes\n", encoding="utf-8")

    r = runner.invoke(app, ["--cwd", str(tmp_path), "milestone", "complete", "v1.0"])
    assert r.exit_code == 2
    assert "E_CONFIG_INVALID" in r.stderr
    assert not (planning / "MILESTONES.md").exists()


def test_cli_validate_consistency(tmp_path):
    planning = _setup(tmp_path)
    (planning / "phases" / "03-extra").mkdir()

    r = runner.invoke(app, ["--cwd", str(tmp_path), "validate", "consistency"])
    assert r.exit_code == 0
    payload = json.loads(r.stdout)
    assert payload["passed"] is False
    assert any("disk but not in ROADMAP" in w for w in payload["warnings"])


def test_cli_progress_text(tmp_path):
    _setup(tmp_path)
    r = runner.invoke(app, ["--cwd", str(tmp_path), "progress", "--format", "text"])
    assert r.exit_code == 0
    assert "Progress" in r.stdout
    assert "01-foundation" in r.stdout
