import json

from typer.testing import CliRunner

from planning_toolkit.cli import app

runner = CliRunner()

REQUIREMENTS = """# Requirements

- [ ] **TEST-01**: first
- [ ] **TEST-02**: second

| Requirement | Phase | Status |
|-------------|-------|--------|
| TEST-01 | Phase 1 | Pending |
| TEST-02 | Phase 1 | Pending |
"""


def _write(tmp_path):
    planning = tmp_path / ".planning"
    planning.mkdir()
    (planning / "REQUIREMENTS.md").write_text(REQUIREMENTS, encoding="utf-8")
    return planning / "REQUIREMENTS.md"


def test_cli_mark_complete_space_separated(tmp_path):
    req = _write(tmp_path)
    r = runner.invoke(
        app, ["--cwd", str(tmp_path), "requirements", "mark-complete", "TEST-01", "TEST-02"]
    )
    assert r.exit_code == 0, r.stdout
    payload = json.loads(r.stdout)
    assert payload["updated"] is True
    assert payload["marked_complete"] == ["TEST-01", "TEST-02"]
    assert payload["total"] == 2

    content = req.read_text(encoding="utf-8")
    assert "- [x] **TEST-01**" in content
    assert "- [x] **TEST-02**" in content


def test_cli_mark_complete_bracket_wrapped(tmp_path):
    _write(tmp_path)
    r = runner.invoke(
        app, ["--cwd", str(tmp_path), "requirements", "mark-complete", "[TEST-01,TEST-02]"]
    )
    assert r.exit_code == 0
    assert len(json.loads(r.stdout)["marked_complete"]) == 2


def test_cli_mark_complete_missing_file_is_not_a_crash(tmp_path):
    r = runner.invoke(app, ["--cwd", str(tmp_path), "requirements", "mark-complete", "TEST-01"])
    assert r.exit_code == 0
    payload = json.loads(r.stdout)
    assert payload == {"updated": False, "reason": "REQUIREMENTS.md not found"}


def test_cli_mark_complete_text_format(tmp_path):
    _write(tmp_path)
    r = runner.invoke(
        app,
        ["--cwd", str(tmp_path), "requirements", "mark-complete", "TEST-01,NOPE-1", "--format", "text"],
    )
    assert r.exit_code == 0
    assert "Marked complete: TEST-01" in r.stdout
    assert "Not found: NOPE-1" in r.stdout


def test_cli_unknown_format(tmp_path):
    _write(tmp_path)
    r = runner.invoke(
        app, ["--cwd", str(tmp_path), "requirements", "mark-complete", "TEST-01", "--format", "xml"]
    )
    assert r.exit_code == 2
    assert "E_UNKNOWN_FORMAT" in r.stderr
