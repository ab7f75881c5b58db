#!/usr/bin/env python3
"""
cli.py - Unified CLI for SpecDelta

Commands:
  validate-spec    Check a specification document's structure
  validate-delta   Check a delta document's syntax
  check            Dry-run: can a delta apply to a baseline?
  apply            Merge a delta into a baseline and write the result
  format           Normalize a specification document
  validate-change  Validate one or all changes in an openspec workspace
"""

from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .applier import apply_delta, validate_delta_application
from .changes import render_report, resolve_change, validate_all_changes, validate_change
from .delta import validate_delta_format
from .errors import SpecDeltaError
from .specification import (
    format_specification,
    parse_specification,
    validate_specification_format,
)
from .textio import read_required_text, write_text

LOG_LEVEL_ENV = "SPECDELTA_LOG_LEVEL"
ROOT_ENV = "SPECDELTA_ROOT"

logger = logging.getLogger(__name__)


def _fail_with_error(err: SpecDeltaError) -> None:
    """Print a structured error message from a ``SpecDeltaError`` and exit.

    Args:
        err: Structured I/O or workspace error.

    Returns:
        None: This function terminates the process.
    """
    context = f" Context: {err.context}." if err.context else ""
    print(
        f"ERROR: {err.code}. {err.message}{context} "
        f"Fix: check the path and retry the command."
    )
    sys.exit(1)


def _cli_error(what: str, why: str, fix: str) -> None:
    """Print a teaching-style CLI error and exit.

    Args:
        what: What failed.
        why: Why it failed.
        fix: Recommended remediation.

    Returns:
        None: This function terminates the process.
    """
    print(f"ERROR: {what}. {why}. Fix: {fix}.")
    sys.exit(1)


def _print_json(data: Dict[str, Any]) -> None:
    print(json.dumps(data, indent=2))


def _print_issues(header: str, issues: List[str]) -> None:
    print(header)
    for issue in issues:
        print(f"  - {issue}")


def _read(path: str, what: str) -> str:
    try:
        return read_required_text(path, what)
    except SpecDeltaError as err:
        _fail_with_error(err)


def cmd_validate_spec(args: argparse.Namespace) -> None:
    """Handle ``specdelta validate-spec``.

    Args:
        args: Parsed CLI arguments with the specification path.
    """
    result = validate_specification_format(_read(args.path, "specification"))
    if args.json:
        _print_json(result.to_dict())
    elif result.is_valid:
        print(f"PASS: {args.path} is a well-formed specification.")
    else:
        _print_issues(f"FAIL: {args.path} has {len(result.issues)} issue(s):", result.issues)
    if not result.is_valid:
        sys.exit(1)


def cmd_validate_delta(args: argparse.Namespace) -> None:
    """Handle ``specdelta validate-delta``."""
    result = validate_delta_format(_read(args.path, "delta specification"))
    if args.json:
        _print_json(result.to_dict())
    elif result.is_valid:
        print(f"PASS: {args.path} is a well-formed delta.")
    else:
        _print_issues(f"FAIL: {args.path} has {len(result.issues)} issue(s):", result.issues)
    if not result.is_valid:
        sys.exit(1)


def cmd_check(args: argparse.Namespace) -> None:
    """Handle ``specdelta check`` (dry-run applicability).

    Args:
        args: Parsed CLI arguments with baseline and delta paths.
    """
    result = validate_delta_application(args.baseline, args.delta)
    if args.json:
        _print_json(result.to_dict())
    elif result.can_apply:
        print(f"PASS: {args.delta} can be applied to {args.baseline}.")
    else:
        _print_issues(f"FAIL: {args.delta} cannot be applied:", result.issues)
    if not result.can_apply:
        sys.exit(1)


def cmd_apply(args: argparse.Namespace) -> None:
    """Handle ``specdelta apply``.

    Runs the applicability check first; a delta that references missing
    requirements is never merged.

    Args:
        args: Parsed CLI arguments with baseline, delta and output paths.
    """
    check = validate_delta_application(args.baseline, args.delta)
    if not check.can_apply:
        if args.json:
            _print_json({"check": check.to_dict(), "apply": None})
            sys.exit(1)
        _print_issues(f"FAIL: {args.delta} cannot be applied:", check.issues)
        _cli_error(
            "Delta application blocked",
            "one or more operations reference requirements the baseline does not have",
            "correct the delta headers or apply against the right baseline",
        )

    if args.dry_run:
        if args.json:
            _print_json({"check": check.to_dict(), "apply": None})
        else:
            print(f"PASS: {args.delta} can be applied to {args.baseline} (dry run, nothing written).")
        return

    result = apply_delta(args.baseline, args.delta, args.output)
    if args.json:
        _print_json({"check": check.to_dict(), "apply": result.to_dict()})
        if not result.success:
            sys.exit(1)
        return

    if not result.success:
        _cli_error(
            "Delta merge failed",
            result.message,
            "fix the reported issues in the baseline or delta and rerun `specdelta apply`",
        )
    print(f"SUCCESS: {result.message} (Hash: {result.content_hash[:16]}...)")


def cmd_format(args: argparse.Namespace) -> None:
    """Handle ``specdelta format``: parse and re-render a specification."""
    text = _read(args.path, "specification")
    formatted = format_specification(parse_specification(text))
    if not args.write:
        print(formatted)
        return
    try:
        write_text(args.path, formatted)
    except SpecDeltaError as err:
        _fail_with_error(err)
    print(f"Formatted: {args.path}")


def cmd_validate_change(args: argparse.Namespace) -> None:
    """Handle ``specdelta validate-change``.

    Args:
        args: Parsed CLI arguments with change name or ``--all`` and root.
    """
    root = Path(args.root or os.environ.get(ROOT_ENV) or ".").resolve()
    if not args.all and not args.name:
        _cli_error(
            "No change selected",
            "validation needs a change name or the --all flag",
            "run `specdelta validate-change <name>` or `specdelta validate-change --all`",
        )

    try:
        if args.all:
            reports = validate_all_changes(root)
        else:
            reports = [validate_change(resolve_change(root, args.name))]
    except SpecDeltaError as err:
        _fail_with_error(err)

    if not reports:
        print("No changes found to validate.")
        return

    for report in reports:
        print(render_report(report))
    if any(r.has_errors for r in reports):
        sys.exit(1)


def _configure_logging(level: Optional[str]) -> None:
    name = (level or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="specdelta", description="Specification delta engine CLI")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: ${LOG_LEVEL_ENV} or WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # validate-spec
    p_vs = sub.add_parser("validate-spec", help="Validate specification structure")
    p_vs.add_argument("path", help="Path to specification markdown")
    p_vs.add_argument("--json", action="store_true", help="Print result as JSON")

    # validate-delta
    p_vd = sub.add_parser("validate-delta", help="Validate delta syntax")
    p_vd.add_argument("path", help="Path to delta markdown")
    p_vd.add_argument("--json", action="store_true", help="Print result as JSON")

    # check
    p_chk = sub.add_parser("check", help="Check whether a delta can apply to a baseline")
    p_chk.add_argument("baseline", help="Path to baseline specification (may not exist)")
    p_chk.add_argument("delta", help="Path to delta markdown")
    p_chk.add_argument("--json", action="store_true", help="Print result as JSON")

    # apply
    p_app = sub.add_parser("apply", help="Merge a delta into a baseline")
    p_app.add_argument("baseline", help="Path to baseline specification (may not exist)")
    p_app.add_argument("delta", help="Path to delta markdown")
    p_app.add_argument("--output", "-o", required=True, help="Where to write the merged specification")
    p_app.add_argument("--dry-run", action="store_true", help="Only run the applicability check")
    p_app.add_argument("--json", action="store_true", help="Print result as JSON")

    # format
    p_fmt = sub.add_parser("format", help="Normalize a specification document")
    p_fmt.add_argument("path", help="Path to specification markdown")
    p_fmt.add_argument("--write", action="store_true", help="Rewrite the file in place")

    # validate-change
    p_vc = sub.add_parser("validate-change", help="Validate openspec change proposals")
    p_vc.add_argument("name", nargs="?", help="Change name under openspec/changes")
    p_vc.add_argument("--all", action="store_true", help="Validate every change")
    p_vc.add_argument("--root", help=f"Project root (default: ${ROOT_ENV} or cwd)")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entrypoint.

    Parses command-line arguments, routes to a subcommand handler, and exits
    with subcommand status semantics.
    """
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level)
    logger.debug("dispatching %s", args.command)

    if args.command == "validate-spec": cmd_validate_spec(args)
    elif args.command == "validate-delta": cmd_validate_delta(args)
    elif args.command == "check": cmd_check(args)
    elif args.command == "apply": cmd_apply(args)
    elif args.command == "format": cmd_format(args)
    elif args.command == "validate-change": cmd_validate_change(args)

if __name__ == "__main__":
    main()
