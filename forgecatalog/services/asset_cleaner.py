"""
Local card art cleaning.

Removes files from the art directory whose bytes don't match their
extension's image signature.

ORDERING: this runs before every other fix stage. Later stages treat
"a {id}.{ext} file exists" as "a usable image exists", which only holds once
the directory has been cleaned.
"""

import logging
from pathlib import Path

from forgecatalog.models.stats import CleanResult
from forgecatalog.services.image_signature import IMAGE_EXTENSIONS, extension_of, is_valid_image

logger = logging.getLogger(__name__)


def iter_image_files(art_dir: Path) -> list[Path]:
    """Regular files in `art_dir` with a recognized image extension, sorted by name."""
    return sorted(
        p for p in art_dir.iterdir() if p.is_file() and extension_of(p) in IMAGE_EXTENSIONS
    )


def clean_assets(art_dir: Path, dry_run: bool = False) -> CleanResult:
    """
    Validate every image in `art_dir` and delete the ones that fail.

    Deletion is best-effort: a file that can't be removed is counted in
    `errors` and left behind. Files with other extensions are not scanned.

    Args:
        art_dir: Directory holding {id}.{ext} card art
        dry_run: Count invalid files without deleting them

    Returns:
        CleanResult with scan/delete counts and the invalid file names.
    """
    result = CleanResult()

    if not art_dir.is_dir():
        logger.warning(
            "card_art_dir_missing",
            extra={"art_dir": str(art_dir)},
        )
        return result

    try:
        files = iter_image_files(art_dir)
    except OSError as e:
        logger.error("Cannot list card art directory %s: %s", art_dir, e)
        result.errors += 1
        return result

    for path in files:
        result.scanned += 1
        ext = extension_of(path)

        if is_valid_image(path, ext):
            logger.debug("ok %s", path.name)
            continue

        result.invalid += 1
        result.invalid_files.append(path.name)

        if dry_run:
            logger.debug("invalid %s (kept, dry run)", path.name)
            continue

        try:
            path.unlink()
        except OSError as e:
            result.errors += 1
            logger.warning("Failed to delete invalid image %s: %s", path, e)
            continue

        result.deleted += 1
        logger.debug("deleted %s", path.name)

    if result.invalid:
        logger.info(
            "card_art_cleaned scanned=%d invalid=%d deleted=%d errors=%d",
            result.scanned,
            result.invalid,
            result.deleted,
            result.errors,
            extra={
                "art_dir": str(art_dir),
                "scanned": result.scanned,
                "invalid": result.invalid,
                "deleted": result.deleted,
                "errors": result.errors,
                "invalid_files": result.invalid_files[:10],  # Log first 10
                "dry_run": dry_run,
            },
        )

    return result
