"""
specification.py - Specification model, parser, formatter and validator

A specification is an ordered list of requirements, each holding an ordered
list of scenarios:

  ### Requirement: <header>
  #### Scenario: <header>
  <description lines>

Parsing is lossy by contract: text between a requirement header and its
first scenario, and anything before the first requirement, is dropped.
format_specification() is the exact inverse of parse_specification() for
every tree the parser can produce.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .results import ValidationResult

logger = logging.getLogger(__name__)

REQUIREMENT_PREFIX = "Requirement:"
SCENARIO_PREFIX = "Scenario:"

_REQUIREMENT_RE = re.compile(r"^###\s+Requirement:(.+)$")
_SCENARIO_RE = re.compile(r"^####\s+Scenario:(.+)$")

# Validation works on any level-3/level-4 header so misnamed ones are caught.
_H3_RE = re.compile(r"^###\s+(.+)$")
_H4_RE = re.compile(r"^####\s+(.+)$")


@dataclass(frozen=True)
class Scenario:
    header: str
    description: str = ""


@dataclass(frozen=True)
class Requirement:
    header: str
    scenarios: Tuple[Scenario, ...] = ()

    def scenario_headers(self) -> List[str]:
        return [s.header for s in self.scenarios]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class _ParseState(Enum):
    NO_SECTION = "no_section"
    IN_REQUIREMENT = "in_requirement"
    IN_SCENARIO = "in_scenario"


class _SpecificationScanner:
    """Line-driven state machine behind parse_specification().

    Every transition flushes whatever the previous state was accumulating.
    """

    def __init__(self) -> None:
        self.state = _ParseState.NO_SECTION
        self.requirements: List[Requirement] = []
        self._req_header: Optional[str] = None
        self._scenarios: List[Scenario] = []
        self._scn_header: Optional[str] = None
        self._buffer: List[str] = []

    def feed(self, line: str) -> None:
        m = _REQUIREMENT_RE.match(line)
        if m:
            self._close_requirement()
            self._req_header = m.group(1).strip()
            self.state = _ParseState.IN_REQUIREMENT
            return

        if self.state is not _ParseState.NO_SECTION:
            m = _SCENARIO_RE.match(line)
            if m:
                self._close_scenario()
                self._scn_header = m.group(1).strip()
                self._buffer = []
                self.state = _ParseState.IN_SCENARIO
                return

        if self.state is _ParseState.IN_SCENARIO:
            self._buffer.append(line)

    def finish(self) -> List[Requirement]:
        self._close_requirement()
        self.state = _ParseState.NO_SECTION
        return self.requirements

    def _close_scenario(self) -> None:
        if self.state is _ParseState.IN_SCENARIO:
            description = "\n".join(self._buffer).strip()
            self._scenarios.append(Scenario(self._scn_header or "", description))
        self._scn_header = None
        self._buffer = []

    def _close_requirement(self) -> None:
        if self.state is _ParseState.NO_SECTION:
            return
        self._close_scenario()
        self.requirements.append(Requirement(self._req_header or "", tuple(self._scenarios)))
        self._req_header = None
        self._scenarios = []


def parse_specification(text: str) -> List[Requirement]:
    """Parse specification markdown into an ordered list of requirements.

    Never raises. Headerless or malformed input yields an empty or partial
    list.
    """
    scanner = _SpecificationScanner()
    for line in text.split("\n"):
        scanner.feed(line)
    requirements = scanner.finish()
    logger.debug("parsed %d requirement(s) from specification", len(requirements))
    return requirements


def requirement_headers(text: str) -> List[str]:
    """Return the requirement headers of a specification, in document order."""
    return [r.header for r in parse_specification(text)]


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_specification(requirements: Sequence[Requirement]) -> str:
    """Render requirements back to specification markdown."""
    parts: List[str] = []
    for requirement in requirements:
        parts.append(f"### Requirement: {requirement.header}\n\n")
        for scenario in requirement.scenarios:
            parts.append(f"#### Scenario: {scenario.header}\n\n")
            parts.append(f"{scenario.description}\n\n")
    return "".join(parts).rstrip()


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _check_header(
    capture: str,
    prefix: str,
    kind: str,
    line_no: int,
    issues: List[str],
) -> bool:
    """Check one header capture; return True if it carries the expected prefix."""
    if not capture.startswith(prefix):
        issues.append(f'Line {line_no}: {kind} header should start with "{prefix}"')
        return False
    if not capture[len(prefix):].strip():
        issues.append(f"Line {line_no}: {kind} header cannot be empty")
    return True


def _duplicates(values: Sequence[str]) -> List[str]:
    """Values seen more than once, unique, in order of first repetition."""
    seen = set()
    dupes: List[str] = []
    for value in values:
        if value in seen and value not in dupes:
            dupes.append(value)
        seen.add(value)
    return dupes


def validate_specification_format(text: str) -> ValidationResult:
    """Check specification markdown for structural well-formedness.

    Works on raw text so issues can carry 1-based line numbers.
    """
    issues: List[str] = []
    req_headers: List[str] = []
    scn_headers: List[str] = []

    for line_no, line in enumerate(text.split("\n"), start=1):
        m = _H3_RE.match(line)
        if m:
            capture = m.group(1)
            if _check_header(capture, REQUIREMENT_PREFIX, "Requirement", line_no, issues):
                req_headers.append(capture)
            continue

        m = _H4_RE.match(line)
        if m:
            capture = m.group(1)
            if _check_header(capture, SCENARIO_PREFIX, "Scenario", line_no, issues):
                scn_headers.append(capture)

    if not req_headers:
        issues.append(
            'No requirement headers found. Specifications should include at least '
            'one "### Requirement:" header.'
        )

    dup_reqs = _duplicates(req_headers)
    if dup_reqs:
        issues.append(f"Duplicate requirement headers found: {', '.join(dup_reqs)}")

    dup_scns = _duplicates(scn_headers)
    if dup_scns:
        issues.append(f"Duplicate scenario headers found: {', '.join(dup_scns)}")

    if issues:
        logger.debug("specification failed validation with %d issue(s)", len(issues))
    return ValidationResult.from_issues(issues)
