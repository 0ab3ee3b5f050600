"""
Catalog file storage.

Loads the cards JSON array and writes it back atomically. The write is the
commit point of a fix run: it happens last, after art has been cleaned, and
either fully replaces the file or leaves the old one in place.
"""

import json
import logging
import math
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

from forgecatalog.models.card import is_record
from forgecatalog.models.failure import FailureKind, LoadError, WriteError

logger = logging.getLogger(__name__)


class NonStandardConstantError(ValueError):
    """NaN or Infinity in the input, which strict JSON parsers reject."""


def _reject_constant(name: str) -> Any:
    raise NonStandardConstantError(f"non-standard JSON constant {name}")


def _parse_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise NonStandardConstantError(f"number {text} is out of range")
    return value


def _target_mode(path: Path) -> int:
    """Permission bits for the rewritten file: the existing file's, else the umask default."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def load_catalog(path: Path) -> list[Any]:
    """
    Load the catalog from a JSON file.

    Args:
        path: Path to a JSON file whose root is an array of card records

    Returns:
        The array exactly as parsed (entries are not checked here).

    Raises:
        LoadError: If the file can't be read, isn't JSON, or isn't an array
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f, parse_constant=_reject_constant, parse_float=_parse_float)
    except FileNotFoundError as e:
        raise LoadError(
            kind=FailureKind.FILE_UNREADABLE,
            message=f"Card catalog not found at {path}.",
            suggestion="Pass --file with the path to cards.json.",
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(
            kind=FailureKind.FILE_UNREADABLE,
            message=f"Card catalog at {path} could not be read.",
            detail=str(e),
        ) from e
    except json.JSONDecodeError as e:
        raise LoadError(
            kind=FailureKind.INVALID_JSON,
            message=f"Card catalog at {path} is not valid JSON.",
            detail=f"line {e.lineno}, column {e.colno}: {e.msg}",
        ) from e
    except NonStandardConstantError as e:
        raise LoadError(
            kind=FailureKind.INVALID_JSON,
            message=f"Card catalog at {path} is not valid JSON.",
            detail=str(e),
        ) from e

    if not isinstance(data, list):
        raise LoadError(
            kind=FailureKind.INVALID_ROOT,
            message=f"Card catalog at {path} must be a JSON array of cards.",
            detail=f"found {type(data).__name__}",
        )

    logger.debug("Loaded %d entries from %s", len(data), path)
    return data


def catalog_sort_key(record: Any) -> str:
    card_id = record.get("id") if is_record(record) else None
    return card_id if isinstance(card_id, str) else ""


def dump_catalog(records: list[Any]) -> str:
    """Serialized catalog: sorted by id, 2-space indent, one trailing newline."""
    ordered = sorted(records, key=catalog_sort_key)
    return json.dumps(ordered, indent=2, ensure_ascii=False, allow_nan=False) + "\n"


def write_catalog(path: Path, records: list[Any]) -> None:
    """
    Atomically replace the catalog file.

    Writes to a temporary file in the same directory, flushes it to disk and
    renames it over `path`, keeping the permission bits of the file it
    replaces. On any failure the temporary file is removed and
    the original is untouched.

    Raises:
        WriteError: If the file could not be written or replaced
    """
    payload = dump_catalog(records)
    path = Path(path)
    tmp_name: str | None = None

    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(payload)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise WriteError(
            kind=FailureKind.WRITE_FAILED,
            message=f"Could not write card catalog to {path}.",
            detail=str(e),
        ) from e

    logger.info("Wrote %d cards to %s", len(records), path)
