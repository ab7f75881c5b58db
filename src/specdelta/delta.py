"""
delta.py - Delta document parser, formatter and validator

A delta document is an ordered list of operations against a baseline
specification:

  ## [ADDED] <requirement header>
  ## [MODIFIED] <requirement header>
  ## [REMOVED] <requirement header>
  ## [RENAMED] <previous header> -> <new header>

Each operation header is followed by free text up to the next operation
header. Operations are applied in file order.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .results import ValidationResult

logger = logging.getLogger(__name__)

_OPERATION_RE = re.compile(r"^##\s+\[(ADDED|MODIFIED|REMOVED|RENAMED)\]\s*(.+)$")
_RENAME_RE = re.compile(r"^(.+)\s*->\s*(.+)$")


class OperationType(Enum):
    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    REMOVED = "REMOVED"
    RENAMED = "RENAMED"


@dataclass(frozen=True)
class DeltaOperation:
    type: OperationType
    header: str
    content: str = ""
    # Only set for RENAMED; header then holds the new name.
    previous_header: Optional[str] = None

    def header_line(self) -> str:
        if self.type is OperationType.RENAMED and self.previous_header:
            return f"## [{self.type.value}] {self.previous_header} -> {self.header}"
        return f"## [{self.type.value}] {self.header}"


def split_rename(header: str) -> Optional[Tuple[str, str]]:
    """Split ``"Previous -> New"`` into stripped ``(previous, new)``, or None."""
    m = _RENAME_RE.match(header)
    if not m:
        return None
    return m.group(1).strip(), m.group(2).strip()


def _open_operation(op_type: OperationType, raw_header: str) -> DeltaOperation:
    if op_type is OperationType.RENAMED:
        sides = split_rename(raw_header)
        if sides:
            previous, new = sides
            return DeltaOperation(op_type, new, previous_header=previous)
    return DeltaOperation(op_type, raw_header.strip())


def parse_delta_operations(text: str) -> List[DeltaOperation]:
    """Parse delta markdown into an ordered list of operations.

    Never raises. Lines before the first operation header are ignored.
    """
    operations: List[DeltaOperation] = []
    current: Optional[DeltaOperation] = None
    buffer: List[str] = []

    def _close() -> None:
        if current is not None:
            operations.append(
                DeltaOperation(
                    current.type,
                    current.header,
                    "\n".join(buffer).strip(),
                    current.previous_header,
                )
            )

    for line in text.split("\n"):
        m = _OPERATION_RE.match(line)
        if m:
            _close()
            current = _open_operation(OperationType(m.group(1)), m.group(2))
            buffer = []
            continue
        if current is not None:
            buffer.append(line)

    _close()
    logger.debug("parsed %d delta operation(s)", len(operations))
    return operations


def format_delta_operations(operations: Sequence[DeltaOperation]) -> str:
    """Render operations back to delta markdown."""
    parts = [f"{op.header_line()}\n{op.content}\n\n" for op in operations]
    return "".join(parts).rstrip()


def validate_delta_format(text: str) -> ValidationResult:
    """Check delta markdown for syntactic well-formedness."""
    issues: List[str] = []
    found = False

    for line_no, line in enumerate(text.split("\n"), start=1):
        m = _OPERATION_RE.match(line)
        if not m:
            continue
        found = True
        op_type, header = m.group(1), m.group(2)

        if not header.strip():
            issues.append(f"Line {line_no}: Operation header cannot be empty")

        if op_type == OperationType.RENAMED.value:
            sides = split_rename(header)
            if sides is None:
                issues.append(
                    f'Line {line_no}: RENAMED operation should follow format '
                    f'"Previous Header -> New Header"'
                )
            elif not all(sides):
                issues.append(f"Line {line_no}: RENAMED operation headers cannot be empty")

    if not found:
        issues.append(
            'No valid delta operations found. At least one operation with format '
            '"## [TYPE] Header" is required.'
        )

    return ValidationResult.from_issues(issues)
