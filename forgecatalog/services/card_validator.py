"""
Catalog record validation.

Read-only and independent of fix mode: the same rules run on the raw file in
validate-only mode and on the fixed records after a fix run. Every rule is
checked; nothing short-circuits.

Semantic problems (bad enums, negative costs, malformed ids) are reported
here and nowhere corrected.
"""

import math
from pathlib import Path
from typing import Any

from forgecatalog.config import CARD_ID_PATTERN, UNKNOWN_CARD_ID
from forgecatalog.models.card import (
    VALID_COLORS,
    VALID_TYPES,
    CardRecord,
    has_text,
    is_record,
    normalize_card_id,
)
from forgecatalog.models.validation import ErrorKind, FieldError, ValidationIssue
from forgecatalog.services.image_resolver import local_ref_is_valid


def _missing(field: str) -> FieldError:
    return FieldError(kind=ErrorKind.MISSING_FIELD, field=field, message=f"{field}: required")


def _check_id(record: CardRecord) -> list[FieldError]:
    card_id = record.get("id")
    if not has_text(card_id):
        return [
            FieldError(
                kind=ErrorKind.MISSING_OR_INVALID_ID,
                field="id",
                message="id: missing or not a string",
            )
        ]
    if not CARD_ID_PATTERN.fullmatch(card_id):
        return [
            FieldError(
                kind=ErrorKind.INVALID_ID_FORMAT,
                field="id",
                message=f"id: {card_id!r} must look like ST01-001 or ST02-005B",
            )
        ]
    return []


def _check_enum(record: CardRecord, field: str, allowed: frozenset[str]) -> list[FieldError]:
    value = record.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        return [_missing(field)]
    if not isinstance(value, str) or value not in allowed:
        return [
            FieldError(
                kind=ErrorKind.INVALID_ENUM,
                field=field,
                message=f"{field}: {value!r} is not one of {', '.join(sorted(allowed))}",
            )
        ]
    return []


def _check_cost(record: CardRecord) -> list[FieldError]:
    if "cost" not in record or record["cost"] is None:
        return [_missing("cost")]

    cost = record["cost"]
    valid = (
        isinstance(cost, int | float)
        and not isinstance(cost, bool)
        and math.isfinite(cost)
        and cost >= 0
    )
    if not valid:
        return [
            FieldError(
                kind=ErrorKind.NEGATIVE_OR_NON_FINITE_COST,
                field="cost",
                message=f"cost: {cost!r} must be a finite number >= 0",
            )
        ]
    return []


def _check_image(record: CardRecord, art_dir: Path | None) -> list[FieldError]:
    image_url = record.get("imageUrl")
    if not has_text(image_url) and not has_text(record.get("placeholderArt")):
        return [
            FieldError(
                kind=ErrorKind.MISSING_IMAGE_SOURCE,
                field="imageUrl",
                message="imageUrl/placeholderArt: no image source",
            )
        ]
    if art_dir is not None and has_text(image_url):
        if local_ref_is_valid(image_url, art_dir) is False:
            return [
                FieldError(
                    kind=ErrorKind.CORRUPT_IMAGE_FILE,
                    field="imageUrl",
                    message=f"imageUrl: {image_url} is missing or not a valid image",
                )
            ]
    return []


def validate_card(record: Any, art_dir: Path | None = None) -> list[FieldError]:
    """
    Validate a single catalog entry.

    Args:
        record: Catalog entry (anything JSON can hold)
        art_dir: When given, local imageUrl references are checked on disk

    Returns:
        Every problem found; empty when the record is valid.
    """
    if not is_record(record):
        return [
            FieldError(
                kind=ErrorKind.MALFORMED_RECORD,
                message=f"entry is {type(record).__name__}, expected an object",
            )
        ]

    errors: list[FieldError] = []
    errors += _check_id(record)
    if not has_text(record.get("name")):
        errors.append(_missing("name"))
    if not has_text(record.get("set")):
        errors.append(_missing("set"))
    errors += _check_enum(record, "color", VALID_COLORS)
    errors += _check_enum(record, "type", VALID_TYPES)
    errors += _check_cost(record)
    errors += _check_image(record, art_dir)
    return errors


def issue_card_id(record: Any) -> str:
    """Id to report an entry under."""
    if is_record(record) and has_text(record.get("id")):
        return str(record["id"])
    return UNKNOWN_CARD_ID


def validate_catalog(
    records: list[Any],
    art_dir: Path | None = None,
    check_duplicates: bool = True,
) -> list[ValidationIssue]:
    """
    Validate a whole catalog.

    With `check_duplicates`, the second and later entries sharing a
    normalized id (trimmed, upper-cased) are also flagged. Only useful on
    raw data; a fixed catalog has no duplicates left.

    Returns:
        One ValidationIssue per failing entry, in input order.
    """
    issues: list[ValidationIssue] = []
    seen_ids: set[str] = set()

    for index, record in enumerate(records):
        errors = validate_card(record, art_dir)

        if check_duplicates and is_record(record) and has_text(record.get("id")):
            normalized = normalize_card_id(record["id"])
            if normalized in seen_ids:
                errors.append(
                    FieldError(
                        kind=ErrorKind.DUPLICATE_ID,
                        field="id",
                        message=f"id: {normalized} appears more than once",
                    )
                )
            seen_ids.add(normalized)

        if errors:
            issues.append(
                ValidationIssue(card_id=issue_card_id(record), index=index, errors=errors)
            )

    return issues
