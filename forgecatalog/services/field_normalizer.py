"""
Per-record field cleanup.

Trims scraped strings and fills the two fields the app cannot render
without (color, type) when they are genuinely missing.

INVARIANT: Only empty or missing values are filled. A present value is
never replaced, even if it looks wrong; the validator reports those.
"""

from typing import Any

from forgecatalog.models.card import (
    CardColor,
    CardRecord,
    CardType,
    is_finite_number,
    is_record,
)

TRIMMED_FIELDS = ("name", "set", "color", "type", "imageUrl", "placeholderArt")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def collapse_whitespace(text: str) -> str:
    """Trim and collapse internal whitespace runs to single spaces."""
    return " ".join(text.split())


def normalize_traits(traits: list[Any]) -> list[str]:
    """Trimmed, non-empty, unique trait strings in first-seen order."""
    seen: dict[str, None] = {}
    for trait in traits:
        if isinstance(trait, str) and trait.strip():
            seen.setdefault(trait.strip(), None)
    return list(seen)


def infer_card_type(record: CardRecord) -> CardType | None:
    """
    Best-effort type for a record that has none.

    Battle stats mean a Unit; a name mentioning "resource" means a Resource.
    Anything else stays unknown.
    """
    if is_finite_number(record.get("ap")) or is_finite_number(record.get("hp")):
        return CardType.UNIT

    name = record.get("name")
    if isinstance(name, str) and "resource" in name.lower():
        return CardType.RESOURCE

    return None


def normalize_card(record: Any) -> tuple[Any, bool]:
    """
    Normalize one catalog record.

    Args:
        record: Raw catalog entry (non-dicts are returned untouched)

    Returns:
        (normalized copy, whether any field changed)
    """
    if not is_record(record):
        return record, False

    card = dict(record)

    card_id = card.get("id")
    if isinstance(card_id, str):
        card["id"] = card_id.strip().upper()

    for key in TRIMMED_FIELDS:
        value = card.get(key)
        if isinstance(value, str):
            card[key] = value.strip()

    text = card.get("text")
    if isinstance(text, str):
        card["text"] = collapse_whitespace(text)

    if _is_missing(card.get("color")):
        card["color"] = CardColor.COLORLESS.value

    if _is_missing(card.get("type")):
        inferred = infer_card_type(card)
        if inferred is not None:
            card["type"] = inferred.value

    traits = card.get("traits")
    if isinstance(traits, list):
        card["traits"] = normalize_traits(traits)

    return card, card != record


def normalize_cards(records: list[Any]) -> tuple[list[Any], int]:
    """Normalize a batch. Returns (records, number of records changed)."""
    normalized: list[Any] = []
    touched = 0
    for record in records:
        card, changed = normalize_card(record)
        normalized.append(card)
        if changed:
            touched += 1
    return normalized, touched
