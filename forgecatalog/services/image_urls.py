"""
Image reference shapes.

An imageUrl is one of: a local art path (/card_art/{id}.{ext}), a URL on a
known card-art host, a generated placeholder URL, or something else. These
helpers classify the string only; they never touch the file system.
"""

from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

from forgecatalog.config import settings
from forgecatalog.services.image_signature import IMAGE_EXTENSIONS, extension_of


@dataclass(frozen=True, slots=True)
class LocalArtRef:
    """A parsed local art path."""

    filename: str
    card_id: str
    ext: str


def local_art_path(card_id: str, ext: str, prefix: str | None = None) -> str:
    """Public path for a local art file, e.g. /card_art/ST01-001.webp."""
    prefix = prefix if prefix is not None else settings.local_art_prefix
    return f"{prefix}{card_id}.{ext}"


def parse_local_art_ref(url: str, prefix: str | None = None) -> LocalArtRef | None:
    """
    Parse `url` as a local art path.

    Returns None unless `url` is `{prefix}{name}.{ext}` with a recognized
    image extension and no further path segments.
    """
    prefix = prefix if prefix is not None else settings.local_art_prefix
    if not url.startswith(prefix):
        return None

    filename = url[len(prefix) :]
    if not filename or "/" in filename or "\\" in filename:
        return None

    ext = extension_of(filename)
    if ext not in IMAGE_EXTENSIONS:
        return None

    return LocalArtRef(filename=filename, card_id=filename[: -(len(ext) + 1)], ext=ext)


def url_host(url: str) -> str | None:
    """Lower-case hostname of an absolute http(s) URL, else None."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if parts.scheme not in ("http", "https") or not parts.hostname:
        return None
    return parts.hostname.lower()


def host_matches(host: str | None, hosts: list[str] | tuple[str, ...]) -> bool:
    """True if `host` is one of `hosts` or a subdomain of one."""
    if not host:
        return False
    return any(host == h or host.endswith(f".{h}") for h in hosts)


def is_remote_art_url(url: str, hosts: list[str] | None = None) -> bool:
    return host_matches(url_host(url), hosts if hosts is not None else settings.remote_image_hosts)


def is_placeholder_url(url: str, hosts: list[str] | None = None) -> bool:
    return host_matches(url_host(url), hosts if hosts is not None else settings.placeholder_hosts)


def strip_query(url: str) -> str:
    """Drop the query string and fragment from a URL."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
