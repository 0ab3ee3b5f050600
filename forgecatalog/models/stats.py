from dataclasses import asdict, dataclass, field


@dataclass
class FixStats:
    """Counters for a single fix run."""

    duplicates_removed: int = 0
    """Records folded into another record with the same id."""

    image_urls_normalized: int = 0
    """Records whose imageUrl was re-pointed or had its query stripped."""

    invalid_local_replaced: int = 0
    """
    Records whose local image reference failed the signature check.

    The broken imageUrl is removed rather than overwritten; placeholderArt
    (when present) is left in its own field as the remaining image source.
    """

    missing_image_source: int = 0
    """Records left with neither imageUrl nor placeholderArt."""

    records_trimmed: int = 0
    """Records changed by field normalization."""

    cards_dropped: int = 0
    """Malformed entries and entries without a usable id."""

    @property
    def changes(self) -> int:
        """
        Number of mutations made to the dataset.

        missing_image_source describes the data rather than a change, so a
        clean re-run can leave it non-zero while changes is zero.
        """
        return (
            self.duplicates_removed
            + self.image_urls_normalized
            + self.invalid_local_replaced
            + self.records_trimmed
            + self.cards_dropped
        )

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class CleanResult:
    """Result of scanning an art directory."""

    scanned: int = 0
    invalid: int = 0
    """Files that failed the signature check (deleted or not)."""
    deleted: int = 0
    errors: int = 0
    invalid_files: list[str] = field(default_factory=list)
