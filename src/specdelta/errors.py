"""
errors.py - SpecDelta Error Taxonomy

Coded errors for the I/O and workspace failures that can occur around the
specification/delta engine. Structural and applicability problems are not
errors: they are reported as issue lists by the validators.
"""

from typing import Optional

__all__ = [
    "SpecDeltaError",
    "SourceNotFoundError",
    "SourceReadError",
    "OutputWriteError",
    "ChangeNotFoundError",
    "WorkspaceNotInitializedError",
]

class SpecDeltaError(Exception):
    """Base class for all SpecDelta errors."""
    def __init__(
        self,
        code: str,
        message: str,
        context: Optional[str] = None,
    ):
        self.code = code
        self.message = message
        self.context = context

        full_msg = f"[{code}] {message}"
        if context:
            full_msg += f" Context: {context}"

        super().__init__(full_msg)

# Input Errors (E1xx)
class SourceNotFoundError(SpecDeltaError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("SPECDELTA_E100", "A required input document does not exist.", context)

class SourceReadError(SpecDeltaError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("SPECDELTA_E101", "An input document exists but could not be read as UTF-8 text.", context)

# Output Errors (E2xx)
class OutputWriteError(SpecDeltaError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("SPECDELTA_E200", "The merged specification could not be written to the output location.", context)

# Workspace Errors (E3xx)
class ChangeNotFoundError(SpecDeltaError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("SPECDELTA_E300", "The requested change directory does not exist.", context)

class WorkspaceNotInitializedError(SpecDeltaError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("SPECDELTA_E301", "No openspec/changes directory was found under the project root.", context)
