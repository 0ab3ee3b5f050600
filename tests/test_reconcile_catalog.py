"""
End-to-end tests for the catalog reconcile job.

These exercise the full pipeline against a real cards.json and card_art
directory in tmp_path:
- validate-only never modifies either store
- fix mode repairs structure, writes atomically and reports what remains
- a second fix run changes nothing
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from forgecatalog.jobs.reconcile_catalog import (
    exit_code_for,
    main,
    run_catalog_check,
    run_fix_pipeline,
)
from forgecatalog.models.failure import LoadError
from forgecatalog.models.validation import ErrorKind


def read_cards(path: Path) -> list[dict]:
    return json.loads(path.read_text(encoding="utf-8"))


# =============================================================================
# SCENARIOS
# =============================================================================


class TestScenarios:
    def test_placeholder_duplicate_merges_into_local_png(
        self, write_cards, write_art, image_bytes, art_dir: Path
    ) -> None:
        write_art("ST01-001.png", image_bytes["png"])
        path = write_cards(
            [
                {"id": "st01-001", "color": "Blue", "placeholderArt": "p.svg"},
                {"id": "ST01-001", "color": "Blue", "imageUrl": "/card_art/ST01-001.png"},
            ]
        )

        report = run_catalog_check(path, art_dir, fix=True)

        cards = read_cards(path)
        assert len(cards) == 1
        assert cards[0]["id"] == "ST01-001"
        assert cards[0]["imageUrl"] == "/card_art/ST01-001.png"
        assert cards[0]["placeholderArt"] == "p.svg"
        assert report.fix_stats is not None
        assert report.fix_stats.duplicates_removed == 1

    def test_html_saved_as_webp_falls_back_to_placeholder(
        self, write_cards, write_art, image_bytes, art_dir: Path, make_card
    ) -> None:
        bad = write_art("GD01-004.webp", image_bytes["html"])
        path = write_cards([make_card(id="GD01-004", imageUrl="/card_art/GD01-004.webp")])

        report = run_catalog_check(path, art_dir, fix=True)

        assert report.clean is not None
        assert report.clean.deleted == 1
        assert not bad.exists()
        card = read_cards(path)[0]
        assert "imageUrl" not in card
        assert card["placeholderArt"].startswith("https://placehold.co/")
        assert report.fix_stats.invalid_local_replaced == 1
        assert report.fix_stats.missing_image_source == 0
        assert report.passed is True

    def test_html_saved_as_webp_without_placeholder_is_missing_source(
        self, write_cards, write_art, image_bytes, art_dir: Path, make_card
    ) -> None:
        write_art("GD01-004.webp", image_bytes["html"])
        path = write_cards(
            [make_card(id="GD01-004", imageUrl="/card_art/GD01-004.webp", placeholderArt=...)]
        )

        report = run_catalog_check(path, art_dir, fix=True)

        assert "imageUrl" not in read_cards(path)[0]
        assert report.fix_stats.missing_image_source == 1
        assert report.issues[0].kinds == [ErrorKind.MISSING_IMAGE_SOURCE]
        assert exit_code_for(report) == 1

    def test_negative_cost_survives_fix_and_is_reported(
        self, write_cards, art_dir: Path, make_card
    ) -> None:
        path = write_cards([make_card(cost=-1)])

        report = run_catalog_check(path, art_dir, fix=True)

        assert read_cards(path)[0]["cost"] == -1
        assert report.issues[0].kinds == [ErrorKind.NEGATIVE_OR_NON_FINITE_COST]
        assert exit_code_for(report) == 1


# =============================================================================
# PIPELINE PROPERTIES
# =============================================================================


class TestFixPipeline:
    def test_garbage_entries_dropped(self, art_dir: Path, make_card) -> None:
        outcome = run_fix_pipeline(["junk", 12, None, make_card(), {"name": "no id"}], art_dir)

        assert [c["id"] for c in outcome.records] == ["ST01-001"]
        assert outcome.stats.cards_dropped == 4

    def test_output_ids_unique_and_sorted(self, art_dir: Path, make_card) -> None:
        records = [
            make_card(id="st01-003"),
            make_card(id="ST01-001"),
            make_card(id=" ST01-003"),
            make_card(id="GD01-010"),
            make_card(id="st01-001"),
        ]

        outcome = run_fix_pipeline(records, art_dir)

        ids = [c["id"] for c in outcome.records]
        assert ids == ["GD01-010", "ST01-001", "ST01-003"]
        assert outcome.stats.duplicates_removed == 2

    def test_type_inferred_and_color_defaulted(self, art_dir: Path, make_card) -> None:
        outcome = run_fix_pipeline([make_card(type=..., color=...)], art_dir)

        card = outcome.records[0]
        assert card["type"] == "Unit"
        assert card["color"] == "Colorless"
        assert outcome.stats.records_trimmed == 1

    def test_uninferable_type_left_unset_and_reported(
        self, write_cards, art_dir: Path, make_card
    ) -> None:
        path = write_cards([make_card(type=..., ap=..., hp=..., name="Strange Card")])

        report = run_catalog_check(path, art_dir, fix=True)

        assert "type" not in read_cards(path)[0]
        assert report.issues[0].kinds == [ErrorKind.MISSING_FIELD]

    def test_unknown_fields_round_trip(self, write_cards, art_dir: Path, make_card) -> None:
        path = write_cards([make_card(zone="Space", linkCondition="[Amuro Ray]")])

        run_catalog_check(path, art_dir, fix=True)

        card = read_cards(path)[0]
        assert card["zone"] == "Space"
        assert card["linkCondition"] == "[Amuro Ray]"

    def test_local_art_adopted(self, art_dir: Path, write_art, image_bytes, make_card) -> None:
        write_art("ST01-001.webp", image_bytes["webp"])

        outcome = run_fix_pipeline([make_card(imageUrl="https://exburst.dev/x.webp")], art_dir)

        assert outcome.records[0]["imageUrl"] == "/card_art/ST01-001.webp"
        assert outcome.stats.image_urls_normalized == 1


class TestIdempotence:
    def test_second_run_changes_nothing(
        self, write_cards, write_art, image_bytes, art_dir: Path, make_card
    ) -> None:
        write_art("ST01-001.png", image_bytes["png"])
        write_art("GD01-004.webp", image_bytes["html"])
        path = write_cards(
            [
                make_card(id="st01-001 ", text=" Draw  1. "),
                make_card(id="ST01-001", imageUrl="/card_art/ST01-001.png"),
                make_card(id="GD01-004", imageUrl="/card_art/GD01-004.webp"),
                make_card(id="ST01-009", imageUrl="https://exburst.dev/a.webp?cache=1"),
                make_card(id="ST01-010", cost=-1, traits=["A", "A"]),
                "junk",
            ]
        )

        first = run_catalog_check(path, art_dir, fix=True)
        after_first = path.read_bytes()
        second = run_catalog_check(path, art_dir, fix=True)

        assert first.fix_stats.changes > 0
        assert path.read_bytes() == after_first
        assert second.fix_stats.changes == 0
        assert second.fix_stats.as_dict() == dict.fromkeys(second.fix_stats.as_dict(), 0)
        assert second.clean.deleted == 0
        assert second.issues == first.issues


# =============================================================================
# MODES AND EXIT STATUS
# =============================================================================


class TestValidateOnly:
    def test_nothing_modified(
        self, write_cards, write_art, image_bytes, art_dir: Path, make_card
    ) -> None:
        bad = write_art("GD01-004.webp", image_bytes["html"])
        path = write_cards([make_card(id="st01-001"), make_card(id="ST01-001")])
        before = path.read_bytes()

        report = run_catalog_check(path, art_dir)

        assert path.read_bytes() == before
        assert bad.exists()
        assert report.fixed is False
        assert report.clean.invalid == 1

    def test_duplicates_reported(self, write_cards, art_dir: Path, make_card) -> None:
        path = write_cards([make_card(), make_card()])

        report = run_catalog_check(path, art_dir)

        assert report.issues[0].kinds == [ErrorKind.DUPLICATE_ID]

    def test_corrupt_local_reference_reported(
        self, write_cards, write_art, image_bytes, art_dir: Path, make_card
    ) -> None:
        write_art("ST01-001.png", image_bytes["html"])
        path = write_cards([make_card(imageUrl="/card_art/ST01-001.png")])

        report = run_catalog_check(path, art_dir)

        assert report.issues[0].kinds == [ErrorKind.CORRUPT_IMAGE_FILE]

    def test_default_art_dir_is_sibling(
        self, write_cards, write_art, image_bytes, make_card
    ) -> None:
        write_art("ST01-001.png", image_bytes["html"])
        path = write_cards([make_card(imageUrl="/card_art/ST01-001.png")])

        report = run_catalog_check(path)

        assert report.clean.scanned == 1


class TestLoadFailure:
    def test_invalid_json_aborts_before_cleaning(
        self, tmp_path: Path, write_art, image_bytes, art_dir: Path
    ) -> None:
        bad = write_art("GD01-004.webp", image_bytes["html"])
        path = tmp_path / "cards.json"
        path.write_text("[{", encoding="utf-8")

        with pytest.raises(LoadError):
            run_catalog_check(path, art_dir, fix=True)

        assert bad.exists()
        assert path.read_text(encoding="utf-8") == "[{"

    def test_nan_cost_aborts_fix_without_rewrite(self, tmp_path: Path, art_dir: Path) -> None:
        path = tmp_path / "cards.json"
        path.write_text('[{"id": "ST01-001", "cost": NaN}]', encoding="utf-8")

        with pytest.raises(LoadError):
            run_catalog_check(path, art_dir, fix=True)

        assert path.read_text(encoding="utf-8") == '[{"id": "ST01-001", "cost": NaN}]'


class TestMain:
    def test_exit_zero_when_valid(self, write_cards, art_dir: Path, make_card, capsys) -> None:
        path = write_cards([make_card()])

        code = main(["--file", str(path), "--art-dir", str(art_dir)])

        assert code == 0
        assert "All cards are valid!" in capsys.readouterr().out

    def test_exit_one_when_invalid(self, write_cards, art_dir: Path, make_card) -> None:
        path = write_cards([make_card(color="Black")])

        assert main(["--file", str(path), "--art-dir", str(art_dir)]) == 1

    def test_exit_one_on_load_error(self, tmp_path: Path) -> None:
        assert main(["--file", str(tmp_path / "missing.json")]) == 1

    def test_fix_flag_repairs(self, write_cards, art_dir: Path, make_card) -> None:
        path = write_cards([make_card(), make_card(id="st01-001")])

        code = main(["--file", str(path), "--art-dir", str(art_dir), "--fix"])

        assert code == 0
        assert len(read_cards(path)) == 1

    def test_json_output(self, write_cards, art_dir: Path, make_card, capsys) -> None:
        path = write_cards([make_card(cost=-1)])

        main(["--file", str(path), "--art-dir", str(art_dir), "--json"])

        data = json.loads(capsys.readouterr().out)
        assert data["invalid"] == 1
        assert data["issues"][0]["card_id"] == "ST01-001"

    def test_default_path_from_settings(self, write_cards, make_card) -> None:
        path = write_cards([make_card()])

        with patch("forgecatalog.jobs.reconcile_catalog.settings.cards_path", path):
            assert main([]) == 0
