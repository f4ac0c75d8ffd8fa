from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import PurePath
from typing import Any, Mapping

logger = logging.getLogger(__name__)

_SCALARS = (str, int, float, bool, type(None))


def sanitize_metadata(metadata: Mapping[str, Any]) -> dict[str, Any]:
    """
    Return a JSON-safe copy of an entry's metadata.

    Scalar and text values (str, int, float, bool, None) pass through unchanged
    and round-trip exactly. Anything else is converted, and does NOT come back
    as the same type after load:

    - datetime/date -> ISO-8601 string
    - Path -> str
    - list/tuple/set -> list (sets sorted by str)
    - nested mappings -> dict with str keys, values sanitized recursively
    - any other object -> str(value), logged as a warning
    """
    return {str(k): _sanitize_value(k, v) for k, v in metadata.items()}


def _sanitize_value(key: object, value: Any) -> Any:
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, PurePath):
        return str(value)
    if isinstance(value, set):
        return [_sanitize_value(key, v) for v in sorted(value, key=str)]
    if isinstance(value, (list, tuple)):
        return [_sanitize_value(key, v) for v in value]
    if isinstance(value, Mapping):
        return {str(k): _sanitize_value(k, v) for k, v in value.items()}

    logger.warning("metadata %r: %s is not JSON-serializable, saving str() of it", key, type(value).__name__)
    return str(value)
