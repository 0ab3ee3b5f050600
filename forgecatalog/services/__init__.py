"""
forgecatalog services.

Catalog reconciliation stages, validation and reporting.
"""

from forgecatalog.services.asset_cleaner import clean_assets
from forgecatalog.services.card_validator import validate_card, validate_catalog
from forgecatalog.services.catalog_report import CatalogReport, build_report, render_report
from forgecatalog.services.catalog_store import dump_catalog, load_catalog, write_catalog
from forgecatalog.services.duplicate_reconciler import (
    ReconcileResult,
    completeness_score,
    image_preference_score,
    reconcile_cards,
)
from forgecatalog.services.field_normalizer import normalize_card, normalize_cards
from forgecatalog.services.image_resolver import (
    ImageResolution,
    find_canonical_local_path,
    resolve_image,
)
from forgecatalog.services.image_signature import IMAGE_EXTENSIONS, is_valid_image

__all__ = [
    "IMAGE_EXTENSIONS",
    "CatalogReport",
    "ImageResolution",
    "ReconcileResult",
    "build_report",
    "clean_assets",
    "completeness_score",
    "dump_catalog",
    "find_canonical_local_path",
    "image_preference_score",
    "is_valid_image",
    "load_catalog",
    "normalize_card",
    "normalize_cards",
    "reconcile_cards",
    "render_report",
    "resolve_image",
    "validate_card",
    "validate_catalog",
    "write_catalog",
]
