"""
Catalog report.

Summarizes a validation run for people: pass/fail counts, every issue
grouped by card id, and the makeup of the valid catalog by color, type and
set.
"""

from collections import Counter
from typing import Any

from pydantic import BaseModel, Field

from forgecatalog.models.card import CardView, is_record
from forgecatalog.models.stats import CleanResult, FixStats
from forgecatalog.models.validation import ValidationIssue

RULE = "━" * 60


class CatalogReport(BaseModel):
    """Outcome of validating a catalog, optionally after a fix run."""

    total: int = Field(..., description="Entries validated")
    valid: int = Field(..., description="Entries with no issues")
    invalid: int = Field(..., description="Entries with at least one issue")
    issues: list[ValidationIssue] = Field(default_factory=list)
    by_color: dict[str, int] = Field(default_factory=dict)
    by_type: dict[str, int] = Field(default_factory=dict)
    by_set: dict[str, int] = Field(default_factory=dict)
    fixed: bool = Field(default=False, description="Whether the fix pipeline ran")
    fix_stats: FixStats | None = None
    clean: CleanResult | None = None

    @property
    def passed(self) -> bool:
        return not self.issues


def _ranked(counter: Counter[str]) -> dict[str, int]:
    """Counts sorted by frequency, then name."""
    return dict(sorted(counter.items(), key=lambda item: (-item[1], item[0])))


def build_report(
    records: list[Any],
    issues: list[ValidationIssue],
    fix_stats: FixStats | None = None,
    clean_result: CleanResult | None = None,
) -> CatalogReport:
    """
    Build a report from validated records and their issues.

    Args:
        records: The entries that were validated
        issues: Output of validate_catalog for those entries
        fix_stats: Counters from the fix run, if one happened
        clean_result: Art directory scan result, if one happened

    Returns:
        CatalogReport with counts and color/type/set breakdowns of valid cards.
    """
    failing = {issue.index for issue in issues}

    colors: Counter[str] = Counter()
    types: Counter[str] = Counter()
    sets: Counter[str] = Counter()
    for index, record in enumerate(records):
        if index in failing or not is_record(record):
            continue
        view = CardView.from_record(record)
        colors[view.color or "?"] += 1
        types[view.type or "?"] += 1
        sets[view.set or "?"] += 1

    return CatalogReport(
        total=len(records),
        valid=len(records) - len(failing),
        invalid=len(failing),
        issues=issues,
        by_color=_ranked(colors),
        by_type=_ranked(types),
        by_set=_ranked(sets),
        fixed=fix_stats is not None,
        fix_stats=fix_stats,
        clean=clean_result,
    )


def _breakdown(title: str, counts: dict[str, int]) -> list[str]:
    lines = [f"\n  By {title}:"]
    if not counts:
        lines.append("    (none)")
    lines.extend(f"    {key}: {count}" for key, count in counts.items())
    return lines


def render_report(report: CatalogReport, verbose: bool = False) -> str:
    """Render a report as plain text for the terminal."""
    lines = [RULE, f"Total cards: {report.total}"]
    lines.append(f"Valid: {report.valid}")
    lines.append(f"Invalid: {report.invalid}")

    if report.clean is not None:
        clean = report.clean
        lines.append(
            f"\nCard art: scanned {clean.scanned}, invalid {clean.invalid}, "
            f"deleted {clean.deleted}, errors {clean.errors}"
        )
        if verbose:
            lines.extend(f"    - {name}" for name in clean.invalid_files)

    if report.fix_stats is not None:
        lines.append("\nFixes:")
        lines.extend(f"  {key}: {value}" for key, value in report.fix_stats.as_dict().items())

    if report.issues:
        grouped: dict[str, list[str]] = {}
        for issue in report.issues:
            grouped.setdefault(issue.card_id, []).extend(str(e) for e in issue.errors)

        lines.append("\nValidation errors:")
        for card_id, messages in grouped.items():
            lines.append(f"\n  Card ID: {card_id}")
            lines.extend(f"    - {message}" for message in messages)

    lines.append("\nStatistics:")
    lines.extend(_breakdown("Color", report.by_color))
    lines.extend(_breakdown("Type", report.by_type))
    lines.extend(_breakdown("Set", report.by_set))

    if report.passed:
        lines.append("\nAll cards are valid!")
    else:
        lines.append(f"\n{report.invalid} card(s) failed validation")
        if not report.fixed:
            lines.append("   Run with --fix to repair structural issues")

    lines.append(RULE)
    return "\n".join(lines)
