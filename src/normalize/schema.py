from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import pandas as pd

from src.normalize.values import as_string_list, clean_text, coerce_timestamp


@dataclass(frozen=True, slots=True)
class InternshipRecord:
    """Normalized view of a stored internship used by every rule."""

    internship_id: str
    title: str
    company_name: str
    domains: tuple[str, ...]
    departments: tuple[str, ...]
    first_round_date: Optional[pd.Timestamp]
    eligibility_criteria: Optional[Mapping[str, Any]]

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> InternshipRecord:
        criteria = payload.get("eligibilityCriteria")
        return cls(
            internship_id=clean_text(payload.get("id")),
            title=clean_text(payload.get("title")),
            company_name=clean_text(payload.get("companyName")),
            domains=tuple(as_string_list(payload.get("domains"))),
            departments=tuple(as_string_list(payload.get("departments"))),
            first_round_date=coerce_timestamp(payload.get("firstRoundDate")),
            eligibility_criteria=criteria if isinstance(criteria, Mapping) else None,
        )

    def is_expired(self, now: pd.Timestamp) -> bool:
        # A deadline equal to ``now`` has already closed.
        return self.first_round_date is not None and self.first_round_date <= now
