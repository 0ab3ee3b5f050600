import re
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Catalog settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="FORGECATALOG_")

    app_name: str = "forgecatalog"

    cards_path: Path = Path("apps/web/lib/data/cards.json")

    # None means the card_art directory next to the cards file
    card_art_dir: Path | None = None

    # Public URL prefix under which local art is served
    local_art_prefix: str = "/card_art/"

    # Hosts whose image URLs are trusted as-is (query/fragment stripped)
    remote_image_hosts: list[str] = ["exburst.dev", "gundam-gcg.com"]

    # Hosts that only ever serve generated placeholder art
    placeholder_hosts: list[str] = ["placehold.co"]

    def resolve_art_dir(self, cards_path: Path | None = None) -> Path:
        """Art directory for a cards file, honouring an explicit override."""
        if self.card_art_dir is not None:
            return self.card_art_dir
        return (cards_path or self.cards_path).parent / "card_art"


settings = Settings()


# =============================================================================
# CATALOG INTEGRITY CONSTANTS
# =============================================================================

# Longest image signature we check is WEBP (RIFF....WEBP, 12 bytes)
SIGNATURE_READ_BYTES = 16

# Alphanumeric prefix, dash, 3-4 digit number, optional variant letter
# (e.g. ST01-001, GD01-004, ST02-005B). Use fullmatch.
CARD_ID_PATTERN = re.compile(r"[A-Z0-9]{2,8}-\d{3,4}[A-Z]?")

# Reported in place of an id when a record has none
UNKNOWN_CARD_ID = "???"
