"""
Validate, and optionally repair, the card catalog.

Validate-only (default) reads cards.json and the card art directory and
reports; nothing is modified. With --fix the catalog is repaired first:

    clean art -> normalize fields -> merge duplicates -> resolve images -> write

and the repaired catalog is then validated. Exit status is 0 only when
validation finds no issues.

Usage:
    python -m forgecatalog.jobs.reconcile_catalog
    python -m forgecatalog.jobs.reconcile_catalog --file cards.json --fix --verbose
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from forgecatalog.config import settings
from forgecatalog.models.failure import KnownError
from forgecatalog.models.stats import CleanResult, FixStats
from forgecatalog.services.asset_cleaner import clean_assets
from forgecatalog.services.card_validator import validate_catalog
from forgecatalog.services.catalog_report import CatalogReport, build_report, render_report
from forgecatalog.services.catalog_store import catalog_sort_key, load_catalog, write_catalog
from forgecatalog.services.duplicate_reconciler import reconcile_cards
from forgecatalog.services.field_normalizer import normalize_cards
from forgecatalog.services.image_resolver import resolve_image

logger = logging.getLogger(__name__)


@dataclass
class FixOutcome:
    """Records and counters produced by the fix pipeline."""

    records: list[dict[str, Any]]
    stats: FixStats
    clean: CleanResult


def run_fix_pipeline(records: list[Any], art_dir: Path) -> FixOutcome:
    """
    Repair a loaded catalog in memory.

    The art directory is cleaned first (invalid files deleted) so that every
    later stage can trust any {id}.{ext} file it finds. The caller commits
    by writing the returned records.

    Args:
        records: Raw catalog entries
        art_dir: Local card art directory

    Returns:
        FixOutcome with id-sorted records and run counters.
    """
    stats = FixStats()

    clean = clean_assets(art_dir)
    logger.debug(
        "Cleaned %s: scanned=%d deleted=%d errors=%d",
        art_dir,
        clean.scanned,
        clean.deleted,
        clean.errors,
    )

    normalized, stats.records_trimmed = normalize_cards(records)
    logger.debug("Normalized %d records (%d changed)", len(normalized), stats.records_trimmed)

    reconciled = reconcile_cards(normalized)
    stats.duplicates_removed = reconciled.duplicates_removed
    stats.cards_dropped = reconciled.cards_dropped
    logger.debug(
        "Reconciled to %d cards (%d duplicates, %d dropped)",
        len(reconciled.merged),
        stats.duplicates_removed,
        stats.cards_dropped,
    )

    resolved: list[dict[str, Any]] = []
    for card in reconciled.merged.values():
        resolution = resolve_image(card, art_dir)
        resolved.append(resolution.record)
        if resolution.had_invalid_local_ref:
            stats.invalid_local_replaced += 1
        elif resolution.changed:
            stats.image_urls_normalized += 1
        if resolution.missing_source:
            stats.missing_image_source += 1
    logger.debug(
        "Resolved images: %d normalized, %d invalid local refs, %d without source",
        stats.image_urls_normalized,
        stats.invalid_local_replaced,
        stats.missing_image_source,
    )

    resolved.sort(key=catalog_sort_key)
    return FixOutcome(records=resolved, stats=stats, clean=clean)


def run_catalog_check(
    cards_path: Path,
    art_dir: Path | None = None,
    fix: bool = False,
) -> CatalogReport:
    """
    Load, optionally fix, then validate the catalog.

    Args:
        cards_path: Path to cards.json
        art_dir: Card art directory (defaults to card_art next to cards_path)
        fix: Repair the catalog and rewrite cards_path

    Returns:
        CatalogReport for the (possibly fixed) catalog.

    Raises:
        LoadError: If cards_path can't be loaded; nothing has been touched
        WriteError: If the fixed catalog can't be written; the old file remains
    """
    if art_dir is None:
        art_dir = settings.resolve_art_dir(cards_path)

    records = load_catalog(cards_path)
    logger.info("Loaded %d entries from %s", len(records), cards_path)

    if not fix:
        clean = clean_assets(art_dir, dry_run=True)
        issues = validate_catalog(records, art_dir, check_duplicates=True)
        return build_report(records, issues, clean_result=clean)

    outcome = run_fix_pipeline(records, art_dir)
    write_catalog(cards_path, outcome.records)

    issues = validate_catalog(outcome.records, art_dir, check_duplicates=False)
    return build_report(
        outcome.records,
        issues,
        fix_stats=outcome.stats,
        clean_result=outcome.clean,
    )


def exit_code_for(report: CatalogReport) -> int:
    return 0 if report.passed else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=settings.app_name,
        description="Validate and repair the card catalog",
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help=f"Path to cards JSON (default: {settings.cards_path})",
    )
    parser.add_argument(
        "--art-dir",
        type=Path,
        default=None,
        help="Card art directory (default: card_art next to the cards file)",
    )
    parser.add_argument(
        "--fix",
        action="store_true",
        help="Repair the catalog in place and delete invalid card art",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-stage counts and per-file scan results",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON instead of text",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    cards_path = args.file or settings.cards_path

    try:
        report = run_catalog_check(cards_path, art_dir=args.art_dir, fix=args.fix)
    except KnownError as e:
        logger.error("%s", e.describe())
        return 1

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print(render_report(report, verbose=args.verbose))

    return exit_code_for(report)


if __name__ == "__main__":
    sys.exit(main())
