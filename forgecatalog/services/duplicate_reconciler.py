"""
Duplicate card reconciliation.

The catalog is append-only: each scrape adds records, so one card id can
appear several times with different image references and different gaps.
Reconciliation collapses each id to one record.

INVARIANTS:
1. Output has exactly one record per normalized id
2. Non-object entries and entries without a usable id are dropped, never merged
3. Merging only fills gaps; it never invents a value no duplicate had
4. For a fixed input order the result is deterministic
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from forgecatalog.models.card import CardRecord, is_record, normalize_card_id
from forgecatalog.services.image_urls import (
    is_placeholder_url,
    is_remote_art_url,
    parse_local_art_ref,
)

logger = logging.getLogger(__name__)

# Fields counted by completeness_score
COMPLETENESS_FIELDS = (
    "name",
    "color",
    "type",
    "set",
    "text",
    "imageUrl",
    "placeholderArt",
    "price",
)

SCORE_LOCAL_ART = 3
SCORE_REMOTE_ART = 2
SCORE_OTHER_IMAGE = 1
SCORE_NO_IMAGE = 0


@dataclass
class ReconcileResult:
    """Result of collapsing duplicate records."""

    merged: dict[str, CardRecord] = field(default_factory=dict)
    """One record per id, in order of each id's first appearance."""

    duplicates_removed: int = 0
    """Sum of (group size - 1) over all ids."""

    malformed_dropped: int = 0
    """Entries that were not JSON objects."""

    missing_id_dropped: int = 0
    """Objects without a usable id."""

    @property
    def cards_dropped(self) -> int:
        return self.malformed_dropped + self.missing_id_dropped


def is_meaningful(value: Any) -> bool:
    """Whether a field value counts as present."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, list | dict | tuple | set):
        return len(value) > 0
    return True


def image_preference_score(record: CardRecord) -> int:
    """
    Rank a record's imageUrl by its shape.

    Local art beats a known card-art host, which beats any other reference.
    Placeholder URLs and missing images score zero. Files are not read here;
    the art directory is validated separately.
    """
    url = record.get("imageUrl")
    if not isinstance(url, str) or not url.strip():
        return SCORE_NO_IMAGE
    url = url.strip()

    if parse_local_art_ref(url) is not None:
        return SCORE_LOCAL_ART
    if is_placeholder_url(url):
        return SCORE_NO_IMAGE
    if is_remote_art_url(url):
        return SCORE_REMOTE_ART
    return SCORE_OTHER_IMAGE


def completeness_score(record: CardRecord) -> int:
    """Count of populated display fields."""
    return sum(1 for key in COMPLETENESS_FIELDS if is_meaningful(record.get(key)))


def pick_winner(candidates: list[CardRecord]) -> int:
    """
    Index of the record a duplicate group is merged onto.

    Highest image score wins, then highest completeness. Remaining ties go to
    the earliest candidate.
    """
    best_index = 0
    best_key = (image_preference_score(candidates[0]), completeness_score(candidates[0]))
    for index, candidate in enumerate(candidates[1:], start=1):
        key = (image_preference_score(candidate), completeness_score(candidate))
        if key > best_key:
            best_index, best_key = index, key
    return best_index


def _union_traits(records: list[CardRecord]) -> list[Any] | None:
    traits: dict[Any, None] = {}
    found = False
    for record in records:
        value = record.get("traits")
        if isinstance(value, list):
            found = True
            for trait in value:
                if isinstance(trait, str):
                    traits.setdefault(trait, None)
    return list(traits) if found else None


def merge_group(candidates: list[CardRecord]) -> CardRecord:
    """
    Merge a group of same-id records into one.

    Starts from the winner and folds the other candidates in their original
    order, copying a field only where the merged record has none. Traits are
    unioned across every candidate.
    """
    winner_index = pick_winner(candidates)
    winner = candidates[winner_index]
    losers = [c for i, c in enumerate(candidates) if i != winner_index]

    merged = dict(winner)
    for loser in losers:
        for key, value in loser.items():
            if key == "traits":
                continue
            if not is_meaningful(merged.get(key)) and is_meaningful(value):
                merged[key] = value

    traits = _union_traits([winner, *losers])
    if traits is not None:
        merged["traits"] = traits

    return merged


def reconcile_cards(records: list[Any]) -> ReconcileResult:
    """
    Collapse duplicate records by normalized id.

    Args:
        records: Normalized catalog entries, possibly containing garbage

    Returns:
        ReconcileResult with one merged record per id and drop counts.
    """
    result = ReconcileResult()

    # Phase 1: group by id, dropping what can't be keyed
    groups: dict[str, list[CardRecord]] = {}
    for record in records:
        if not is_record(record):
            result.malformed_dropped += 1
            continue

        card_id = normalize_card_id(record.get("id"))
        if card_id is None:
            result.missing_id_dropped += 1
            continue

        groups.setdefault(card_id, []).append(record)

    # Phase 2: one record per group
    for card_id, group in groups.items():
        if len(group) == 1:
            merged = dict(group[0])
        else:
            merged = merge_group(group)
            result.duplicates_removed += len(group) - 1
            logger.debug("merged %d records for %s", len(group), card_id)
        merged["id"] = card_id
        result.merged[card_id] = merged

    if result.duplicates_removed or result.cards_dropped:
        logger.info(
            "catalog_reconciled unique=%d duplicates_removed=%d dropped=%d",
            len(result.merged),
            result.duplicates_removed,
            result.cards_dropped,
            extra={
                "unique_cards": len(result.merged),
                "duplicates_removed": result.duplicates_removed,
                "malformed_dropped": result.malformed_dropped,
                "missing_id_dropped": result.missing_id_dropped,
            },
        )

    return result
