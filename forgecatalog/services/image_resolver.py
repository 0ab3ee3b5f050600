"""
Image source resolution.

Picks the one image reference a card should carry. A valid local file is
authoritative; a broken local reference is dropped in favour of the
placeholder; known remote URLs are only tidied, never re-pointed.

ORDERING: runs once per record after reconciliation and after the art
directory has been cleaned.
"""

from dataclasses import dataclass
from pathlib import Path

from forgecatalog.config import settings
from forgecatalog.models.card import CardRecord, has_text, normalize_card_id
from forgecatalog.services.image_signature import IMAGE_EXTENSIONS, is_valid_image
from forgecatalog.services.image_urls import (
    is_remote_art_url,
    local_art_path,
    parse_local_art_ref,
    strip_query,
)


@dataclass
class ImageResolution:
    """Outcome of resolving one record's image."""

    record: CardRecord
    changed: bool = False
    missing_source: bool = False
    had_invalid_local_ref: bool = False


def find_canonical_local_path(card_id: str, art_dir: Path) -> str | None:
    """
    Public path of the best valid local file for `card_id`.

    Probes {id}.webp, .png, .jpg, .jpeg in that order and returns the first
    one whose bytes pass the signature check.
    """
    for ext in IMAGE_EXTENSIONS:
        if is_valid_image(art_dir / f"{card_id}.{ext}", ext):
            return local_art_path(card_id, ext)
    return None


def local_ref_is_valid(url: str, art_dir: Path) -> bool | None:
    """
    Check a local art reference against the file it names.

    Returns None when `url` is not a local art path.
    """
    ref = parse_local_art_ref(url)
    if ref is None:
        return None
    return is_valid_image(art_dir / ref.filename, ref.ext)


def resolve_image(
    record: CardRecord,
    art_dir: Path,
    remote_hosts: list[str] | None = None,
) -> ImageResolution:
    """
    Resolve the canonical imageUrl for one record.

    Rules, first match wins:
    1. A valid local file exists: point imageUrl at it. This also covers a
       record whose only source was a placeholder.
    2. imageUrl names a local file that fails validation: drop imageUrl, so
       the placeholder (if any) is the remaining source.
    3. imageUrl is on a known remote host: strip query and fragment.
    4. Otherwise leave the record alone.

    A record left with neither imageUrl nor placeholderArt is flagged
    missing_source.

    Args:
        record: Reconciled record (not modified)
        art_dir: Directory holding local card art
        remote_hosts: Hosts to treat as card-art hosts (defaults to settings)

    Returns:
        ImageResolution with the resolved copy and what happened.
    """
    card = dict(record)
    result = ImageResolution(record=card)
    hosts = remote_hosts if remote_hosts is not None else settings.remote_image_hosts

    card_id = normalize_card_id(card.get("id"))
    canonical = find_canonical_local_path(card_id, art_dir) if card_id else None
    image_url = card.get("imageUrl")

    if canonical is not None:
        if image_url != canonical:
            card["imageUrl"] = canonical
            result.changed = True
    elif isinstance(image_url, str) and local_ref_is_valid(image_url, art_dir) is False:
        del card["imageUrl"]
        result.changed = True
        result.had_invalid_local_ref = True
    elif isinstance(image_url, str) and is_remote_art_url(image_url, hosts):
        stripped = strip_query(image_url)
        if stripped != image_url:
            card["imageUrl"] = stripped
            result.changed = True

    if not has_text(card.get("imageUrl")) and not has_text(card.get("placeholderArt")):
        result.missing_source = True

    return result
