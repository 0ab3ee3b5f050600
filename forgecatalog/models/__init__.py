from forgecatalog.models.card import (
    VALID_COLORS,
    VALID_TYPES,
    CardColor,
    CardRecord,
    CardType,
    CardView,
    normalize_card_id,
)
from forgecatalog.models.failure import FailureKind, KnownError, LoadError, WriteError
from forgecatalog.models.stats import CleanResult, FixStats
from forgecatalog.models.validation import ErrorKind, FieldError, ValidationIssue

__all__ = [
    "VALID_COLORS",
    "VALID_TYPES",
    "CardColor",
    "CardRecord",
    "CardType",
    "CardView",
    "CleanResult",
    "ErrorKind",
    "FailureKind",
    "FieldError",
    "FixStats",
    "KnownError",
    "LoadError",
    "ValidationIssue",
    "WriteError",
    "normalize_card_id",
]
