from planning_toolkit.core.io.frontmatter import parse_frontmatter, parse_scalar


PLAN_HEAD = "\n".join(
    [
        "---",
        "phase: 01-test",
        "plan: 01",
        "type: execute",
        "wave: 2",
        "depends_on: [01-01, '01-02']",
        "files_modified:",
        "  - src/a.py",
        "  - src/b.py",
        "autonomous: false",
        "must_haves:",
        "  truths:",
        '    - "something is true"',
        "    - other truth",
        "  artifacts: []",
        "---",
        "",
        "# Body",
    ]
)


def test_parses_scalars_lists_and_nested_mapping():
    fm, body = parse_frontmatter(PLAN_HEAD)
    assert fm is not None
    assert fm["phase"] == "01-test"
    assert fm["plan"] == "01"
    assert fm["wave"] == "2"
    assert fm["depends_on"] == ["01-01", "01-02"]
    assert fm["files_modified"] == ["src/a.py", "src/b.py"]
    assert fm["autonomous"] == "false"
    assert fm["must_haves"] == {
        "truths": ["something is true", "other truth"],
        "artifacts": [],
    }
    assert body.strip() == "# Body"


def test_no_frontmatter_returns_none_and_full_body():
    text = "# No frontmatter here\n\nJust a plan.\n"
    fm, body = parse_frontmatter(text)
    assert fm is None
    assert body == text


def test_unterminated_frontmatter_is_treated_as_body():
    text = "---\nphase: 01\n# never closed\n"
    fm, body = parse_frontmatter(text)
    assert fm is None
    assert body == text


def test_value_with_colon_and_hyphenated_key():
    fm, _ = parse_frontmatter("---\none-liner: Auth: JWT with refresh rotation\n---\n")
    assert fm == {"one-liner": "Auth: JWT with refresh rotation"}


def test_block_list_at_key_indent():
    fm, _ = parse_frontmatter("---\ndepends_on:\n- 01-01\n- 01-02\nwave: 2\n---\n")
    assert fm == {"depends_on": ["01-01", "01-02"], "wave": "2"}


def test_empty_value_without_children_is_none():
    fm, _ = parse_frontmatter("---\ndepends_on:\nwave: 1\n---\n")
    assert fm == {"depends_on": None, "wave": "1"}


def test_parse_scalar_flow_list_and_quotes():
    assert parse_scalar("[]") == []
    assert parse_scalar("[a, 'b', \"c\"]") == ["a", "b", "c"]
    assert parse_scalar("'quoted'") == "quoted"
    assert parse_scalar("plain") == "plain"
