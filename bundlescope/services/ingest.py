from __future__ import annotations

import json
import math
from typing import Any

from result import Err, Ok

from bundlescope.models.enums import StatsErrorCode
from bundlescope.models.stats import ProgressCallback, StatsDocument, StatsError, StatsResult
from bundlescope.services.fs import DEFAULT_FS, FileSystem

_CONTENT_KEYS = ("assets", "modules", "chunks")
_MAX_REPORTED_ERRORS = 3


def read_number(value: Any) -> float | None:
    """Return *value* as a number, or None when it is absent or not numeric.

    Booleans are rejected even though ``bool`` subclasses ``int``, and so are
    floats that overflowed to infinity (``1e400`` is valid JSON).
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def load_stats(
    path: str,
    fs: FileSystem = DEFAULT_FS,
    progress_callback: ProgressCallback | None = None,
) -> StatsResult:
    """Read, parse and validate the stats file at *path*."""
    if progress_callback is not None:
        progress_callback("Reading stats file")
    resolved = fs.expanduser(path)
    if not fs.is_file(resolved):
        return Err(StatsError(StatsErrorCode.FILE_NOT_FOUND, resolved, f"Stats file not found: {resolved}"))
    try:
        text = fs.read_text(resolved)
    except UnicodeDecodeError as exc:
        return Err(StatsError(StatsErrorCode.PARSE_ERROR, resolved, f"Invalid JSON in stats file: {exc}"))
    except OSError as exc:
        return Err(StatsError(StatsErrorCode.FILE_NOT_FOUND, resolved, f"Cannot read stats file: {exc}"))

    if progress_callback is not None:
        progress_callback("Validating stats")
    return parse_stats(resolved, text)


def parse_stats(path: str, text: str) -> StatsResult:
    try:
        payload = json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        return Err(StatsError(StatsErrorCode.PARSE_ERROR, path, f"Invalid JSON in stats file: {exc}"))

    error = validate_stats(path, payload)
    if error is not None:
        return Err(error)
    return Ok(StatsDocument(path=path, data=payload))


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are accepted by the json module but are not JSON.
    raise ValueError(f"{name} is not a valid JSON value")


def validate_stats(path: str, payload: Any) -> StatsError | None:
    """Check the structural minimums a document needs before analysis.

    Returns None when the document is analyzable, otherwise the first
    problem found.
    """
    if not isinstance(payload, dict):
        return _schema_error(path, "Invalid stats: top-level value must be a JSON object")

    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        shown = "; ".join(_error_text(item) for item in errors[:_MAX_REPORTED_ERRORS])
        more = len(errors) - _MAX_REPORTED_ERRORS
        if more > 0:
            shown += f" (and {more} more)"
        return StatsError(StatsErrorCode.BUILD_FAILED, path, f"Build failed with {len(errors)} error(s): {shown}")

    present = {key: payload[key] for key in _CONTENT_KEYS if isinstance(payload.get(key), list)}
    if not present:
        return _schema_error(path, "Invalid stats: stats file must contain an assets, modules or chunks array")
    if not _has_content(present):
        return _schema_error(path, "Stats file contains no modules or assets")

    for key in ("assets", "modules"):
        for item in present.get(key, []):
            if _is_negative(item):
                return _schema_error(path, f"Invalid stats: {key[:-1]} sizes must be non-negative")
    for chunk in present.get("chunks", []):
        refs = chunk.get("modules") if isinstance(chunk, dict) else None
        if isinstance(refs, list) and any(_is_negative(ref) for ref in refs):
            return _schema_error(path, "Invalid stats: module sizes must be non-negative")
    return None


def _has_content(present: dict[str, list[Any]]) -> bool:
    if present.get("assets") or present.get("modules"):
        return True
    for chunk in present.get("chunks", []):
        if not isinstance(chunk, dict):
            continue
        size = read_number(chunk.get("size"))
        if chunk.get("modules") or (size is not None and size > 0):
            return True
    return False


def _is_negative(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    size = read_number(item.get("size"))
    return size is not None and size < 0


def _error_text(item: Any) -> str:
    if isinstance(item, dict):
        text = item.get("message") or item.get("details")
        if text:
            return str(text)
    return str(item)


def _schema_error(path: str, message: str) -> StatsError:
    return StatsError(StatsErrorCode.SCHEMA_ERROR, path, message)
