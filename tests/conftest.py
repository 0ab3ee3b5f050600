import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

PNG_HEADER = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 32
JPEG_HEADER = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32
WEBP_HEADER = b"RIFF" + (1024).to_bytes(4, "little") + b"WEBPVP8 " + b"\x00" * 32
HTML_PAGE = b"<!DOCTYPE html><html><body>404 Not Found</body></html>"


@pytest.fixture
def image_bytes() -> dict[str, bytes]:
    """Minimal valid headers per extension, plus an HTML error page."""
    return {
        "png": PNG_HEADER,
        "jpg": JPEG_HEADER,
        "jpeg": JPEG_HEADER,
        "webp": WEBP_HEADER,
        "html": HTML_PAGE,
    }


@pytest.fixture
def art_dir(tmp_path: Path) -> Path:
    """Empty card art directory next to where cards.json will live."""
    path = tmp_path / "card_art"
    path.mkdir()
    return path


@pytest.fixture
def write_art(art_dir: Path) -> Callable[[str, bytes], Path]:
    """Write a file into the art directory."""

    def _write(name: str, data: bytes) -> Path:
        path = art_dir / name
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def write_cards(tmp_path: Path) -> Callable[[Any], Path]:
    """Write a cards.json file (any JSON value) and return its path."""

    def _write(payload: Any) -> Path:
        path = tmp_path / "cards.json"
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_card() -> Callable[..., dict[str, Any]]:
    """Build a fully valid card record, with overrides."""

    def _make(**overrides: Any) -> dict[str, Any]:
        card: dict[str, Any] = {
            "id": "ST01-001",
            "name": "Gundam",
            "color": "Blue",
            "cost": 3,
            "type": "Unit",
            "set": "Heroic Beginnings",
            "text": "When deployed, draw 1.",
            "ap": 3,
            "hp": 4,
            "traits": ["Earth Federation", "White Base Team"],
            "placeholderArt": "https://placehold.co/600x840/1f2937/f9fafb?text=Gundam",
        }
        card.update(overrides)
        return {k: v for k, v in card.items() if v is not ...}

    return _make
