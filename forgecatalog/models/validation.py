"""
Validation result models.

Record-level problems are reported as data, never raised. A run produces a
list of ValidationIssue (one per failing catalog entry); nothing here is
persisted.
"""

from enum import Enum

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Classification of record-level catalog problems."""

    # Structural (fixed automatically in fix mode)
    MALFORMED_RECORD = "malformed_record"
    MISSING_OR_INVALID_ID = "missing_or_invalid_id"
    DUPLICATE_ID = "duplicate_id"

    # Semantic (reported, never auto-corrected)
    MISSING_FIELD = "missing_field"
    INVALID_ENUM = "invalid_enum"
    INVALID_ID_FORMAT = "invalid_id_format"
    NEGATIVE_OR_NON_FINITE_COST = "negative_or_non_finite_cost"

    # Image bookkeeping
    MISSING_IMAGE_SOURCE = "missing_image_source"
    CORRUPT_IMAGE_FILE = "corrupt_image_file"


class FieldError(BaseModel):
    """A single problem found on a record."""

    kind: ErrorKind = Field(
        ...,
        description="Classification of the problem",
    )
    field: str | None = Field(
        default=None,
        description="Record field the problem concerns, if any",
    )
    message: str = Field(
        ...,
        description="Human-readable explanation",
    )

    def __str__(self) -> str:
        return self.message


class ValidationIssue(BaseModel):
    """All problems found on one catalog entry."""

    card_id: str = Field(
        ...,
        description="Card id as found, or '???' when the entry has none",
    )
    index: int = Field(
        ...,
        description="Position of the entry in the validated list",
    )
    errors: list[FieldError] = Field(default_factory=list)

    @property
    def kinds(self) -> list[ErrorKind]:
        return [error.kind for error in self.errors]
