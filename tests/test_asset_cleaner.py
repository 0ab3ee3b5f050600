"""Tests for card art directory cleaning."""

import logging
from pathlib import Path
from unittest.mock import patch

from forgecatalog.services.asset_cleaner import clean_assets, iter_image_files


class TestCleanAssets:
    def test_valid_files_kept(self, art_dir: Path, write_art, image_bytes) -> None:
        write_art("ST01-001.webp", image_bytes["webp"])
        write_art("ST01-002.png", image_bytes["png"])
        write_art("ST01-003.jpg", image_bytes["jpg"])
        write_art("ST01-004.jpeg", image_bytes["jpeg"])

        result = clean_assets(art_dir)

        assert result.scanned == 4
        assert result.invalid == 0
        assert result.deleted == 0
        assert result.errors == 0
        assert len(list(art_dir.iterdir())) == 4

    def test_html_error_page_deleted(self, art_dir: Path, write_art, image_bytes) -> None:
        """An HTML page saved as .webp is removed."""
        bad = write_art("GD01-004.webp", image_bytes["html"])
        good = write_art("GD01-005.webp", image_bytes["webp"])

        result = clean_assets(art_dir)

        assert result.deleted == 1
        assert result.invalid_files == ["GD01-004.webp"]
        assert not bad.exists()
        assert good.exists()

    def test_wrong_format_for_extension_deleted(self, art_dir: Path, write_art, image_bytes):
        """A real PNG named .jpg still fails: the bytes must match the name."""
        path = write_art("ST01-001.jpg", image_bytes["png"])

        result = clean_assets(art_dir)

        assert result.deleted == 1
        assert not path.exists()

    def test_unrecognized_extensions_ignored(self, art_dir: Path, write_art) -> None:
        notes = write_art("notes.txt", b"hello")
        gif = write_art("ST01-001.gif", b"not a gif")

        result = clean_assets(art_dir)

        assert result.scanned == 0
        assert result.deleted == 0
        assert notes.exists()
        assert gif.exists()

    def test_upper_case_extension_scanned(self, art_dir: Path, write_art, image_bytes) -> None:
        path = write_art("ST01-001.PNG", image_bytes["html"])

        result = clean_assets(art_dir)

        assert result.scanned == 1
        assert not path.exists()

    def test_subdirectories_not_scanned(self, art_dir: Path, write_art, image_bytes) -> None:
        nested = art_dir / "old"
        nested.mkdir()
        (nested / "ST01-001.png").write_bytes(image_bytes["html"])

        result = clean_assets(art_dir)

        assert result.scanned == 0
        assert (nested / "ST01-001.png").exists()

    def test_missing_directory_returns_empty_result(self, tmp_path: Path) -> None:
        result = clean_assets(tmp_path / "does-not-exist")

        assert result.scanned == 0
        assert result.deleted == 0
        assert result.errors == 0

    def test_dry_run_keeps_invalid_files(self, art_dir: Path, write_art, image_bytes) -> None:
        bad = write_art("GD01-004.webp", image_bytes["html"])

        result = clean_assets(art_dir, dry_run=True)

        assert result.invalid == 1
        assert result.deleted == 0
        assert bad.exists()

    def test_delete_failure_counted_not_raised(self, art_dir: Path, write_art, image_bytes):
        """Deletion is best-effort; a failure is counted and the scan continues."""
        write_art("ST01-001.png", image_bytes["html"])
        write_art("ST01-002.png", image_bytes["html"])

        with patch.object(Path, "unlink", side_effect=PermissionError("read-only")):
            result = clean_assets(art_dir)

        assert result.scanned == 2
        assert result.invalid == 2
        assert result.deleted == 0
        assert result.errors == 2

    def test_second_run_finds_nothing(self, art_dir: Path, write_art, image_bytes) -> None:
        write_art("GD01-004.webp", image_bytes["html"])
        write_art("GD01-005.png", image_bytes["png"])

        clean_assets(art_dir)
        second = clean_assets(art_dir)

        assert second.scanned == 1
        assert second.deleted == 0

    def test_summary_logged_with_counts(
        self, art_dir: Path, write_art, image_bytes, caplog
    ) -> None:
        write_art("GD01-004.webp", image_bytes["html"])
        write_art("GD01-005.png", image_bytes["png"])

        with caplog.at_level(logging.INFO, logger="forgecatalog.services.asset_cleaner"):
            clean_assets(art_dir)

        assert "card_art_cleaned scanned=2 invalid=1 deleted=1 errors=0" in caplog.messages


class TestIterImageFiles:
    def test_sorted_by_name(self, art_dir: Path, write_art, image_bytes) -> None:
        write_art("B.png", image_bytes["png"])
        write_art("A.webp", image_bytes["webp"])

        assert [p.name for p in iter_image_files(art_dir)] == ["A.webp", "B.png"]
