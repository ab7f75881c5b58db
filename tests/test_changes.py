import pytest

from specdelta.changes import (
    ChangeReport,
    render_report,
    resolve_change,
    validate_all_changes,
    validate_change,
)
from specdelta.errors import ChangeNotFoundError, WorkspaceNotInitializedError

PROPOSAL = "# Proposal\n\n### Requirement: Login\n\n#### Scenario: Works\nIt works."


@pytest.fixture
def workspace(tmp_path):
    changes = tmp_path / "openspec" / "changes"
    changes.mkdir(parents=True)
    return tmp_path


def _make_change(workspace, name, files):
    change = workspace / "openspec" / "changes" / name
    change.mkdir(parents=True)
    for rel, text in files.items():
        path = change / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return change


def test_clean_change(workspace):
    change = _make_change(workspace, "login", {
        "proposal.md": PROPOSAL,
        "tasks.md": "- [ ] implement",
        "specs/auth.md": "## [ADDED] Login",
    })
    report = validate_change(change)
    assert report.name == "login"
    assert report.errors == []
    assert report.warnings == []
    assert not report.has_errors


def test_missing_change_directory(tmp_path):
    report = validate_change(tmp_path / "nope")
    assert report.errors == ['Change "nope" not found.']
    assert report.has_errors


def test_missing_required_files(workspace):
    change = _make_change(workspace, "bare", {})
    report = validate_change(change)
    assert report.errors == [
        'Required file "proposal.md" not found.',
        'Required file "tasks.md" not found.',
    ]


def test_empty_files_are_warnings(workspace):
    change = _make_change(workspace, "empty", {
        "proposal.md": "  \n",
        "tasks.md": "",
        "design.md": "\n",
    })
    report = validate_change(change)
    assert report.errors == []
    assert report.warnings == [
        'File "proposal.md" is empty.',
        'File "tasks.md" is empty.',
        'File "design.md" is empty.',
    ]


def test_proposal_format_issues_become_warnings(workspace):
    change = _make_change(workspace, "loose", {
        "proposal.md": "# Proposal\n\nNo structure here.",
        "tasks.md": "- [ ] x",
    })
    report = validate_change(change)
    assert not report.has_errors
    assert len(report.warnings) == 1
    assert report.warnings[0].startswith(
        'File "proposal.md" has specification format issue: No requirement headers found.'
    )


def test_specs_directory_checks(workspace):
    change = _make_change(workspace, "deltas", {
        "proposal.md": PROPOSAL,
        "tasks.md": "- [ ] x",
        "specs/a.md": "## [RENAMED] Old New",
        "specs/b.md": "",
        "specs/notes.txt": "ignored",
    })
    report = validate_change(change)
    assert report.warnings == [
        'Spec file "a.md" has delta format issue: Line 1: RENAMED operation should '
        'follow format "Previous Header -> New Header"',
    ]


def test_empty_specs_directory(workspace):
    change = _make_change(workspace, "nospecs", {
        "proposal.md": PROPOSAL,
        "tasks.md": "- [ ] x",
    })
    (change / "specs").mkdir()
    assert validate_change(change).warnings == ["Specs directory is empty."]


def test_validate_all_changes_sorted(workspace):
    _make_change(workspace, "zeta", {"proposal.md": PROPOSAL, "tasks.md": "x"})
    _make_change(workspace, "alpha", {"tasks.md": "x"})
    (workspace / "openspec" / "changes" / "README.md").write_text("not a change")

    reports = validate_all_changes(workspace)

    assert [r.name for r in reports] == ["alpha", "zeta"]
    assert reports[0].has_errors
    assert not reports[1].has_errors


def test_validate_all_requires_workspace(tmp_path):
    with pytest.raises(WorkspaceNotInitializedError):
        validate_all_changes(tmp_path)


def test_resolve_change(workspace):
    change = _make_change(workspace, "login", {})
    assert resolve_change(workspace, "login") == change
    with pytest.raises(ChangeNotFoundError):
        resolve_change(workspace, "missing")


def test_render_report():
    assert render_report(ChangeReport("ok")) == "## ok\n  No issues found."
    report = ChangeReport("bad", errors=["E1"], warnings=["W1"])
    assert render_report(report) == "## bad\n  ERROR: E1\n  WARNING: W1"
    assert report.to_dict()["has_errors"] is True
