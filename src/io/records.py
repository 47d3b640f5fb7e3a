from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Iterable, Mapping
from uuid import uuid4

import numpy as np
import pandas as pd

from src.normalize.values import coerce_timestamp
from src.rank.settings import FilterSettings

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".json", ".parquet")


def _jsonable(value: Any) -> Any:
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, np.ndarray):
        return [_jsonable(item) for item in value.tolist()]
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, np.generic):
        return _jsonable(value.item())
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, pd.Timestamp):
        if pd.isna(value):
            return None
        if value.tzinfo is not None:
            return value.tz_convert("UTC").isoformat()
        return value.isoformat()
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def _read_payload(input_path: Path) -> Any:
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    suffix = input_path.suffix.lower()
    if suffix == ".json":
        return json.loads(input_path.read_text(encoding="utf-8"))
    if suffix == ".parquet":
        frame = pd.read_parquet(input_path)
        return [_jsonable(record) for record in frame.to_dict(orient="records")]

    raise ValueError(f"Unsupported input format '{suffix}'. Use {' or '.join(SUPPORTED_SUFFIXES)}")


def load_internships(input_path: Path) -> list[dict[str, Any]]:
    """Load a materialized internship list.

    JSON input may be a bare list or an object with an ``internships`` list.
    Entries that are not objects are dropped with a warning.
    """

    payload = _read_payload(input_path)
    if isinstance(payload, Mapping):
        payload = payload.get("internships", [])
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of internships in {input_path}")

    internships = [dict(item) for item in payload if isinstance(item, Mapping)]
    dropped = len(payload) - len(internships)
    if dropped:
        logger.warning("Dropped %d non-object internship entries from %s", dropped, input_path)
    return internships


def load_profile(input_path: Path | None) -> dict[str, Any] | None:
    if input_path is None:
        return None
    payload = _read_payload(input_path)
    if isinstance(payload, list):
        payload = payload[0] if len(payload) == 1 else None
    if not isinstance(payload, Mapping):
        raise ValueError(f"Expected a single profile object in {input_path}")
    return dict(payload)


def load_applied_ids(input_path: Path | None) -> frozenset[str]:
    """Load applied internship ids from a list of ids or of application documents."""

    if input_path is None:
        return frozenset()
    payload = _read_payload(input_path)
    if isinstance(payload, Mapping):
        payload = payload.get("applications", [])
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of applications in {input_path}")

    ids: set[str] = set()
    for item in payload:
        value = item.get("internshipId") if isinstance(item, Mapping) else item
        if value is None:
            continue
        text = str(value).strip()
        if text:
            ids.add(text)
    return frozenset(ids)


def load_filter_settings(input_path: Path | None) -> FilterSettings:
    if input_path is None or not input_path.exists():
        return FilterSettings.baseline()
    payload = json.loads(input_path.read_text(encoding="utf-8"))
    if not isinstance(payload, Mapping):
        raise ValueError(f"{input_path.name} must contain a JSON object.")
    return FilterSettings.from_mapping(payload)


def sort_by_posted_date(internships: Iterable[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Newest ``postedDate`` first; undated records keep their order at the end."""

    dated: list[tuple[pd.Timestamp, int, Mapping[str, Any]]] = []
    undated: list[Mapping[str, Any]] = []
    for position, internship in enumerate(internships):
        posted = coerce_timestamp(internship.get("postedDate"))
        if posted is None:
            undated.append(internship)
        else:
            dated.append((posted, position, internship))

    dated.sort(key=lambda item: (-item[0].value, item[1]))
    return [item[2] for item in dated] + undated


def write_json_atomic(payload: Any, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = output_path.parent / f"{output_path.name}.{uuid4().hex}.tmp"
    try:
        temp_path.write_text(
            json.dumps(_jsonable(payload), indent=2, sort_keys=True, ensure_ascii=False),
            encoding="utf-8",
        )
        temp_path.replace(output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()
