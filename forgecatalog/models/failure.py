"""
Fatal failure types.

Record-level problems are data (see models.validation). A run stops only
when the dataset cannot be loaded or cannot be written back. Both are raised
as KnownError subclasses so the job entry point can explain them and exit
non-zero with the previous cards file still in place.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of fatal failures."""

    FILE_UNREADABLE = "file_unreadable"
    INVALID_JSON = "invalid_json"
    INVALID_ROOT = "invalid_root"
    WRITE_FAILED = "write_failed"


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def describe(self) -> str:
        """One-line explanation for CLI output."""
        parts = [self.message]
        if self.detail:
            parts.append(f"({self.detail})")
        if self.suggestion:
            parts.append(self.suggestion)
        return " ".join(parts)


class LoadError(KnownError):
    """
    The catalog file could not be loaded.

    Raised before any stage runs, so neither the dataset nor the art
    directory has been touched when this propagates.
    """


class WriteError(KnownError):
    """The catalog file could not be replaced. The original is left intact."""
