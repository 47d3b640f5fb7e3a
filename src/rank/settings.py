from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class FilterSettings:
    """Tunables shared by eligibility, notifications and recommendations.

    `cgpa_percentage_factor` converts a 10-point CGPA into a percentage for
    percentage-type criteria.
    """

    cgpa_percentage_factor: float = 9.5
    notification_list_limit: int = 3
    recommendation_limit: int = 3

    def __post_init__(self) -> None:
        factor = _as_float(self.cgpa_percentage_factor, "cgpa_percentage_factor")
        if not math.isfinite(factor) or factor <= 0.0:
            raise ValueError("Setting 'cgpa_percentage_factor' must be a positive finite number.")
        for field_name in ("notification_list_limit", "recommendation_limit"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Setting '{field_name}' must be an integer.")
            if value < 1:
                raise ValueError(f"Setting '{field_name}' must be at least 1.")

    @classmethod
    def baseline(cls) -> FilterSettings:
        return cls()

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> FilterSettings:
        values = payload or {}
        baseline = cls.baseline()
        return cls(
            cgpa_percentage_factor=_as_float(
                values.get("cgpa_percentage_factor", baseline.cgpa_percentage_factor),
                "cgpa_percentage_factor",
            ),
            notification_list_limit=_as_int(
                values.get("notification_list_limit", baseline.notification_list_limit),
                "notification_list_limit",
            ),
            recommendation_limit=_as_int(
                values.get("recommendation_limit", baseline.recommendation_limit),
                "recommendation_limit",
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "cgpa_percentage_factor": self.cgpa_percentage_factor,
            "notification_list_limit": self.notification_list_limit,
            "recommendation_limit": self.recommendation_limit,
        }


def _as_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"Setting '{field_name}' must be a number.")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Setting '{field_name}' must be a number.") from exc


def _as_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Setting '{field_name}' must be an integer.")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"Setting '{field_name}' must be an integer.")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Setting '{field_name}' must be an integer.") from exc
