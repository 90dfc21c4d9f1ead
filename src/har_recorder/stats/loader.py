"""HAR document loading and structural validation.

Validation is strict at the document level only: the root must be an object
with a ``log`` object holding an ``entries`` array. Individual entries are
read leniently by the aggregator.
"""

from __future__ import annotations

import gzip
import json
import logging
import zlib
from pathlib import Path
from typing import Any

_LOGGER = logging.getLogger(__name__)

# HAR files above this size are still parsed whole, but the user is warned
DEFAULT_LARGE_HAR_SIZE = 50 * 1024 * 1024


class MalformedHarError(ValueError):
    """Raised when a document is not parseable JSON or lacks log.entries."""

    def __init__(self, message: str, path: str = "") -> None:
        self.message = message
        self.path = path
        full_message = f"Malformed HAR: {message}"
        if path:
            full_message += f" (at {path})"
        super().__init__(full_message)


def validate_har_document(har_data: Any) -> list[Any]:
    """Check the minimal HAR structure and return the entry list.

    Args:
        har_data: Parsed JSON document

    Returns:
        The ``log.entries`` list, untouched

    Raises:
        MalformedHarError: If root, log or entries is missing or mistyped

    Example:
        >>> validate_har_document({"log": {"entries": []}})
        []
    """
    if not isinstance(har_data, dict):
        raise MalformedHarError("document root must be an object", "root")

    if "log" not in har_data:
        raise MalformedHarError("missing required 'log' key", "root")

    log = har_data["log"]
    if not isinstance(log, dict):
        raise MalformedHarError("'log' must be an object", "log")

    if "entries" not in log:
        raise MalformedHarError("missing required 'entries' key", "log")

    entries = log["entries"]
    if not isinstance(entries, list):
        raise MalformedHarError("'entries' must be an array", "log.entries")

    return entries


def load_har(
    har_path: str | Path,
    *,
    large_file_warning: int | None = DEFAULT_LARGE_HAR_SIZE,
) -> dict[str, Any]:
    """Read a ``.har`` or ``.har.gz`` file and validate its structure.

    Args:
        har_path: Path to the HAR file
        large_file_warning: Size in bytes above which a warning is logged.
            None disables the check.

    Returns:
        The parsed HAR document

    Raises:
        MalformedHarError: If the file is not valid JSON or lacks log.entries
        FileNotFoundError: If the file does not exist
    """
    har_path = Path(har_path)

    if large_file_warning is not None:
        file_size = har_path.stat().st_size
        if file_size > large_file_warning:
            _LOGGER.warning(
                "Large HAR file (%.2f KB); reading it fully into memory",
                file_size / 1024,
            )

    try:
        if har_path.name.endswith(".gz"):
            with gzip.open(har_path, "rt", encoding="utf-8") as f:
                har_data = json.load(f)
        else:
            with open(har_path, encoding="utf-8") as f:
                har_data = json.load(f)
    except json.JSONDecodeError as e:
        raise MalformedHarError(f"invalid JSON: {e.msg} at line {e.lineno}", str(har_path)) from e
    except UnicodeDecodeError as e:
        raise MalformedHarError(f"file is not UTF-8 text: {e.reason}", str(har_path)) from e
    except (gzip.BadGzipFile, EOFError, zlib.error) as e:
        raise MalformedHarError(f"invalid or truncated gzip data: {e}", str(har_path)) from e

    validate_har_document(har_data)
    _LOGGER.debug("Loaded HAR with %d entries from %s", len(har_data["log"]["entries"]), har_path)
    return har_data
