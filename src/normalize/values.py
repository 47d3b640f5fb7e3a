from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Any, Iterable, Mapping

import pandas as pd

logger = logging.getLogger(__name__)


def normalize_text(value: Any) -> str:
    """Lowercase, trim and collapse whitespace; non-strings normalize to ``""``."""

    if not isinstance(value, str):
        return ""
    return " ".join(value.strip().lower().split())


def clean_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def coerce_float(value: Any) -> float | None:
    """Parse a stored numeric value, returning ``None`` when it is not a finite number."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(numeric):
        return None
    return numeric


def as_string_list(value: Any) -> list[str]:
    """Coerce a stored list-ish value into a list of non-blank strings.

    A bare string becomes a singleton list; ``None`` and mappings become ``[]``.
    Non-string items inside a sequence are dropped.
    """

    if value is None:
        return []
    if isinstance(value, str):
        cleaned = value.strip()
        return [cleaned] if cleaned else []
    if isinstance(value, (Mapping, bytes)):
        logger.debug("Ignoring non-sequence list value of type %s", type(value).__name__)
        return []
    if isinstance(value, Iterable):
        items: list[str] = []
        for item in value:
            if isinstance(item, str) and item.strip():
                items.append(item.strip())
        return items
    return []


def coerce_timestamp(value: Any) -> pd.Timestamp | None:
    """Parse a deadline into a UTC timestamp.

    Accepts ISO strings, ``datetime``/``date`` objects, epoch milliseconds and
    document-store mappings with ``seconds``/``nanoseconds``. Naive values are
    read as UTC. Anything unparseable returns ``None``.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Mapping):
        seconds = coerce_float(value.get("seconds", value.get("_seconds")))
        if seconds is None:
            return None
        nanos = coerce_float(value.get("nanoseconds", value.get("_nanoseconds"))) or 0.0
        return _from_epoch(int(seconds * 1_000_000_000 + nanos), unit="ns")
    if isinstance(value, (int, float)):
        if not math.isfinite(float(value)):
            return None
        return _from_epoch(int(value), unit="ms")
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if not isinstance(value, (str, datetime)):
        logger.debug("Unsupported timestamp type %s treated as absent", type(value).__name__)
        return None

    parsed = pd.to_datetime(value, errors="coerce", utc=True)
    if parsed is None or pd.isna(parsed):
        logger.debug("Unparseable timestamp value %r treated as absent", value)
        return None
    return pd.Timestamp(parsed)


def _from_epoch(value: int, *, unit: str) -> pd.Timestamp | None:
    try:
        return pd.Timestamp(value, unit=unit, tz="UTC")
    except (OverflowError, ValueError):
        logger.debug("Epoch value %r out of range treated as absent", value)
        return None
