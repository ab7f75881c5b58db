"""
applier.py - Merge delta operations into baseline specifications

Pure core:
  merge_operations()         fold operations into a requirement list
  merge_delta()              text in, merged text out
  check_delta_application()  dry-run applicability check on text

Path-level contract (never raises):
  apply_delta()                  read, merge, validate, write
  validate_delta_application()   read, check applicability

Merge semantics per operation, in file order:
  ADDED     append a new requirement with no scenarios
  MODIFIED  replace the first matching requirement with an empty one
            (previous scenarios are dropped, operation content is ignored)
  REMOVED   delete the first matching requirement
  RENAMED   rename the first requirement matching previous_header

Operations that match nothing are no-ops at merge time; the
applicability check is where they are reported.
"""

from __future__ import annotations
import dataclasses
import hashlib
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .delta import DeltaOperation, OperationType, parse_delta_operations
from .results import ApplicabilityResult, ApplyResult
from .specification import (
    Requirement,
    format_specification,
    parse_specification,
    validate_specification_format,
)
from .textio import PathLike, read_optional_text, read_required_text, write_text

logger = logging.getLogger(__name__)


def content_hash(text: str) -> str:
    """Return lowercase hex SHA-256 digest of UTF-8 text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _find(requirements: Sequence[Requirement], header: Optional[str]) -> int:
    for i, requirement in enumerate(requirements):
        if requirement.header == header:
            return i
    return -1


def merge_operations(
    requirements: Sequence[Requirement],
    operations: Sequence[DeltaOperation],
) -> List[Requirement]:
    """Fold operations into requirements and return the new list.

    The input sequence is not modified.
    """
    merged = list(requirements)
    for op in operations:
        if op.type is OperationType.ADDED:
            merged.append(Requirement(op.header))
            continue

        target = op.previous_header if op.type is OperationType.RENAMED else op.header
        idx = _find(merged, target)
        if idx == -1:
            logger.debug("%s %r matched no requirement; skipped", op.type.value, target)
            continue

        if op.type is OperationType.MODIFIED:
            merged[idx] = Requirement(op.header)
        elif op.type is OperationType.REMOVED:
            del merged[idx]
        elif op.type is OperationType.RENAMED:
            merged[idx] = dataclasses.replace(merged[idx], header=op.header)
    return merged


def merge_delta(baseline_text: Optional[str], delta_text: str) -> str:
    """Merge delta markdown into baseline markdown and return the result.

    A missing or blank baseline is an empty specification. A delta with no
    operations leaves the baseline text untouched.
    """
    operations = parse_delta_operations(delta_text)
    if not operations:
        return baseline_text or ""

    baseline: List[Requirement] = []
    if baseline_text and baseline_text.strip():
        baseline = parse_specification(baseline_text)

    merged = merge_operations(baseline, operations)
    logger.debug(
        "merged %d operation(s): %d -> %d requirement(s)",
        len(operations), len(baseline), len(merged),
    )
    return format_specification(merged)


def check_delta_application(
    baseline_text: Optional[str],
    delta_text: str,
) -> ApplicabilityResult:
    """Report operations that cannot apply to the baseline.

    ``baseline_text=None`` means no baseline exists, in which case only
    ADDED operations are applicable.
    """
    operations = parse_delta_operations(delta_text)
    issues: List[str] = []

    if baseline_text is None:
        for op in operations:
            if op.type is not OperationType.ADDED:
                issues.append(
                    f"Operation {op.type.value} cannot be applied because no "
                    f"baseline specification exists"
                )
        return ApplicabilityResult.from_issues(issues)

    headers = {r.header for r in parse_specification(baseline_text)}
    for op in operations:
        if op.type in (OperationType.MODIFIED, OperationType.REMOVED):
            if op.header not in headers:
                issues.append(
                    f'Operation {op.type.value} references non-existent requirement: "{op.header}"'
                )
        elif op.type is OperationType.RENAMED and op.previous_header:
            if op.previous_header not in headers:
                issues.append(
                    f'Rename operation references non-existent requirement: "{op.previous_header}"'
                )
    return ApplicabilityResult.from_issues(issues)


def apply_delta(
    baseline_path: PathLike,
    delta_path: PathLike,
    output_path: PathLike,
) -> ApplyResult:
    """Merge the delta file into the baseline file and write the result.

    Nothing is written when the merged specification fails structural
    validation. I/O failures are returned as ``success=False``.
    """
    output = Path(output_path)
    try:
        baseline_text = read_optional_text(baseline_path)
        delta_text = read_required_text(delta_path, "delta specification")

        merged = merge_delta(baseline_text, delta_text)

        validation = validate_specification_format(merged)
        if not validation.is_valid:
            logger.warning("merged specification rejected: %s", "; ".join(validation.issues))
            return ApplyResult(
                success=False,
                message=(
                    "Merged specification has validation issues: "
                    f"{', '.join(validation.issues)}"
                ),
            )

        write_text(output, merged)
    except Exception as e:
        logger.warning("apply failed for %s: %s", delta_path, e)
        return ApplyResult(
            success=False,
            message=f"Failed to apply delta operations: {e}",
        )

    return ApplyResult(
        success=True,
        message=f"Successfully applied delta operations and merged specification to {output}",
        output_path=output,
        content_hash=content_hash(merged),
    )


def validate_delta_application(
    baseline_path: PathLike,
    delta_path: PathLike,
) -> ApplicabilityResult:
    """Dry-run applicability check between a baseline file and a delta file."""
    try:
        delta_text = read_required_text(delta_path, "delta specification")
        baseline_text = read_optional_text(baseline_path)
    except Exception as e:
        logger.warning("applicability check failed for %s: %s", delta_path, e)
        return ApplicabilityResult(
            can_apply=False,
            issues=[f"Failed to validate delta application: {e}"],
        )
    return check_delta_application(baseline_text, delta_text)
