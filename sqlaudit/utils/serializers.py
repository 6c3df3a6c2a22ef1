"""JSON serialization utilities for sqlaudit."""

import datetime
import json
from decimal import Decimal
from typing import Any
from uuid import UUID

__all__ = ("to_json",)


def _default(value: Any) -> Any:
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return repr(value)


def to_json(data: Any) -> str:
    """Encode data to a compact JSON string.

    Values JSON cannot represent natively (datetimes, decimals, UUIDs) are
    rendered as strings so log records never fail to serialize.

    Args:
        data: Data to encode.

    Returns:
        JSON string representation.
    """
    return json.dumps(data, default=_default, separators=(",", ":"))
