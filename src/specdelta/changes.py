"""
changes.py - Validate change proposals in an openspec workspace

A change lives in ``openspec/changes/<name>/`` and holds:

  proposal.md   required, checked as a specification
  tasks.md      required
  design.md     optional
  specs/*.md    optional delta documents, checked as deltas

Missing required files are errors; everything else is a warning.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .delta import validate_delta_format
from .errors import ChangeNotFoundError, WorkspaceNotInitializedError
from .specification import validate_specification_format
from .textio import PathLike, read_required_text

logger = logging.getLogger(__name__)

WORKSPACE_DIR = "openspec"
CHANGES_DIR = "changes"
SPECS_DIR = "specs"
REQUIRED_CHANGE_FILES = ("proposal.md", "tasks.md")
OPTIONAL_CHANGE_FILES = ("design.md",)


@dataclass
class ChangeReport:
    name: str
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "has_errors": self.has_errors,
        }


def changes_root(project_root: PathLike) -> Path:
    return Path(project_root) / WORKSPACE_DIR / CHANGES_DIR


def resolve_change(project_root: PathLike, name: str) -> Path:
    """Return the directory of a named change.

    Raises:
        WorkspaceNotInitializedError: No openspec/changes under project_root.
        ChangeNotFoundError: The change directory does not exist.
    """
    root = changes_root(project_root)
    if not root.is_dir():
        raise WorkspaceNotInitializedError(str(root))
    change_dir = root / name
    if not change_dir.is_dir():
        raise ChangeNotFoundError(str(change_dir))
    return change_dir


def validate_change(change_dir: PathLike) -> ChangeReport:
    change_dir = Path(change_dir)
    report = ChangeReport(name=change_dir.name)

    if not change_dir.is_dir():
        report.errors.append(f'Change "{report.name}" not found.')
        return report

    for filename in REQUIRED_CHANGE_FILES:
        path = change_dir / filename
        if not path.exists():
            report.errors.append(f'Required file "{filename}" not found.')
            continue
        text = read_required_text(path, filename).strip()
        if not text:
            report.warnings.append(f'File "{filename}" is empty.')
        elif filename == "proposal.md":
            for issue in validate_specification_format(text).issues:
                report.warnings.append(
                    f'File "{filename}" has specification format issue: {issue}'
                )

    for filename in OPTIONAL_CHANGE_FILES:
        path = change_dir / filename
        if path.exists() and not read_required_text(path, filename).strip():
            report.warnings.append(f'File "{filename}" is empty.')

    specs_dir = change_dir / SPECS_DIR
    if specs_dir.is_dir():
        spec_files = sorted(p for p in specs_dir.glob("*.md") if p.is_file())
        if not spec_files:
            report.warnings.append("Specs directory is empty.")
        for path in spec_files:
            text = read_required_text(path, path.name).strip()
            if not text:
                continue
            for issue in validate_delta_format(text).issues:
                report.warnings.append(
                    f'Spec file "{path.name}" has delta format issue: {issue}'
                )

    logger.debug(
        "change %s: %d error(s), %d warning(s)",
        report.name, len(report.errors), len(report.warnings),
    )
    return report


def validate_all_changes(project_root: PathLike) -> List[ChangeReport]:
    """Validate every change under project_root, sorted by name.

    Raises:
        WorkspaceNotInitializedError: No openspec/changes under project_root.
    """
    root = changes_root(project_root)
    if not root.is_dir():
        raise WorkspaceNotInitializedError(str(root))
    return [validate_change(d) for d in sorted(root.iterdir()) if d.is_dir()]


def render_report(report: ChangeReport) -> str:
    lines = [f"## {report.name}"]
    lines += [f"  ERROR: {e}" for e in report.errors]
    lines += [f"  WARNING: {w}" for w in report.warnings]
    if len(lines) == 1:
        lines.append("  No issues found.")
    return "\n".join(lines)
