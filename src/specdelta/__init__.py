"""SpecDelta public API.

Parse, validate, format and merge structured specification documents and
the delta documents that amend them.

Example:
    from specdelta import apply_delta, validate_delta_application

    check = validate_delta_application("specs/auth.md", "changes/login/specs/auth.md")
    if check.can_apply:
        result = apply_delta("specs/auth.md", "changes/login/specs/auth.md", "specs/auth.md")
        print(result.message)
"""

from .errors import (
    SpecDeltaError,
    SourceNotFoundError,
    SourceReadError,
    OutputWriteError,
    ChangeNotFoundError,
    WorkspaceNotInitializedError,
)
from .results import ValidationResult, ApplicabilityResult, ApplyResult
from .specification import (
    Requirement,
    Scenario,
    parse_specification,
    format_specification,
    validate_specification_format,
    requirement_headers,
)
from .delta import (
    OperationType,
    DeltaOperation,
    parse_delta_operations,
    format_delta_operations,
    validate_delta_format,
)
from .applier import (
    merge_operations,
    merge_delta,
    check_delta_application,
    apply_delta,
    validate_delta_application,
    content_hash,
)
from .changes import ChangeReport, validate_change, validate_all_changes

__version__ = "0.1.0"

__all__ = [
    "SpecDeltaError",
    "SourceNotFoundError",
    "SourceReadError",
    "OutputWriteError",
    "ChangeNotFoundError",
    "WorkspaceNotInitializedError",
    "ValidationResult",
    "ApplicabilityResult",
    "ApplyResult",
    "Requirement",
    "Scenario",
    "parse_specification",
    "format_specification",
    "validate_specification_format",
    "requirement_headers",
    "OperationType",
    "DeltaOperation",
    "parse_delta_operations",
    "format_delta_operations",
    "validate_delta_format",
    "merge_operations",
    "merge_delta",
    "check_delta_application",
    "apply_delta",
    "validate_delta_application",
    "content_hash",
    "ChangeReport",
    "validate_change",
    "validate_all_changes",
]
