"""
results.py - SpecDelta result records

Value objects returned by the validators and the delta applier. None of
the engine's public entrypoints raise for structural or applicability
problems; they return one of these instead.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    issues: List[str] = field(default_factory=list)

    @classmethod
    def from_issues(cls, issues: List[str]) -> "ValidationResult":
        return cls(is_valid=not issues, issues=list(issues))

    def to_dict(self) -> Dict[str, Any]:
        return {"is_valid": self.is_valid, "issues": list(self.issues)}


@dataclass(frozen=True)
class ApplicabilityResult:
    can_apply: bool
    issues: List[str] = field(default_factory=list)

    @classmethod
    def from_issues(cls, issues: List[str]) -> "ApplicabilityResult":
        return cls(can_apply=not issues, issues=list(issues))

    def to_dict(self) -> Dict[str, Any]:
        return {"can_apply": self.can_apply, "issues": list(self.issues)}


@dataclass(frozen=True)
class ApplyResult:
    success: bool
    message: str
    output_path: Optional[Path] = None
    content_hash: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "output_path": str(self.output_path) if self.output_path else None,
            "content_hash": self.content_hash,
        }
