"""
Card record models.

Catalog records are open key/value maps: the scraper adds fields over time
and anything this package does not reason about is carried through untouched.
CardView is the typed lens over the handful of fields the pipeline reads.

INVARIANTS:
- Records stay plain dicts (key order preserved, unknown keys kept)
- CardView is read-only and never writes back into a record
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

CardRecord = dict[str, Any]


class CardColor(str, Enum):
    """Card colors printed on the official cards."""

    BLUE = "Blue"
    GREEN = "Green"
    RED = "Red"
    WHITE = "White"
    PURPLE = "Purple"
    COLORLESS = "Colorless"


class CardType(str, Enum):
    """Card types (Unit, Pilot, Command, Base, Resource)."""

    UNIT = "Unit"
    PILOT = "Pilot"
    COMMAND = "Command"
    BASE = "Base"
    RESOURCE = "Resource"


VALID_COLORS: frozenset[str] = frozenset(c.value for c in CardColor)
VALID_TYPES: frozenset[str] = frozenset(t.value for t in CardType)


def is_record(value: Any) -> bool:
    """True for JSON objects (the only entries the catalog can hold)."""
    return isinstance(value, dict)


def is_finite_number(value: Any) -> bool:
    """True for real ints/floats that are finite. JSON booleans are not numbers."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)


def has_text(value: Any) -> bool:
    """True for strings that are non-empty after trimming."""
    return isinstance(value, str) and bool(value.strip())


def normalize_card_id(value: Any) -> str | None:
    """Trimmed, upper-cased id, or None when there is no usable id."""
    if not isinstance(value, str):
        return None
    card_id = value.strip().upper()
    return card_id or None


def _text_or_none(value: Any) -> str | None:
    return value.strip() if has_text(value) else None


@dataclass(frozen=True, slots=True)
class CardView:
    """
    Typed view over a catalog record.

    Attributes:
        id: Normalized card id (e.g., "ST01-001"), None if unusable
        name: Card name
        color: Color string as stored (may be outside CardColor)
        type: Type string as stored (may be outside CardType)
        set: Set name
        cost: Cost if it is a finite number
        image_url: Canonical image reference
        placeholder_art: Generated fallback art URL
        traits: Trait strings in stored order
    """

    id: str | None
    name: str | None
    color: str | None
    type: str | None
    set: str | None
    cost: float | None
    image_url: str | None
    placeholder_art: str | None
    traits: tuple[str, ...] = ()

    @classmethod
    def from_record(cls, record: CardRecord) -> "CardView":
        cost = record.get("cost")
        traits = record.get("traits")
        return cls(
            id=normalize_card_id(record.get("id")),
            name=_text_or_none(record.get("name")),
            color=_text_or_none(record.get("color")),
            type=_text_or_none(record.get("type")),
            set=_text_or_none(record.get("set")),
            cost=cost if is_finite_number(cost) else None,
            image_url=_text_or_none(record.get("imageUrl")),
            placeholder_art=_text_or_none(record.get("placeholderArt")),
            traits=tuple(t for t in traits if isinstance(t, str))
            if isinstance(traits, list)
            else (),
        )

    @property
    def has_image_source(self) -> bool:
        return self.image_url is not None or self.placeholder_art is not None
