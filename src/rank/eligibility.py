from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from src.normalize.values import as_string_list, clean_text, coerce_float, normalize_text
from src.rank.settings import FilterSettings

CRITERIA_TYPE_CGPA = "cgpa"
CRITERIA_TYPE_PERCENTAGE = "percentage"

YEAR_NOT_ALLOWED = "YEAR_NOT_ALLOWED"
INVALID_ACADEMIC_RECORD = "INVALID_ACADEMIC_RECORD"
TENTH_BELOW_MIN = "TENTH_BELOW_MIN"
TWELFTH_BELOW_MIN = "TWELFTH_BELOW_MIN"
CGPA_PERCENT_BELOW_MIN = "CGPA_PERCENT_BELOW_MIN"
CGPA_BELOW_MIN = "CGPA_BELOW_MIN"


@dataclass(frozen=True, slots=True)
class StudentProfile:
    department: str | None = None
    cgpa: Any = None
    tenth_percentage: Any = None
    twelfth_percentage: Any = None
    current_year: str | None = None
    interested_domains: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_record(cls, record: Mapping[str, Any] | None) -> StudentProfile | None:
        """Build a profile from a stored user document; ``None`` stays ``None``."""

        if record is None:
            return None
        interests = as_string_list(record.get("interestedDomains")) or as_string_list(
            record.get("interests")
        )
        return cls(
            department=clean_text(record.get("department")) or None,
            cgpa=record.get("cgpa"),
            tenth_percentage=record.get("tenthPercentage"),
            twelfth_percentage=record.get("twelfthPercentage"),
            current_year=clean_text(record.get("currentYear")) or None,
            interested_domains=tuple(interests),
        )


@dataclass(frozen=True, slots=True)
class EligibilityCriteria:
    type: str = CRITERIA_TYPE_CGPA
    min_cgpa: float | None = None
    min_percentage: float | None = None
    allowed_years: tuple[str, ...] = field(default_factory=tuple)
    note: str = ""

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> EligibilityCriteria | None:
        if payload is None or not isinstance(payload, Mapping):
            return None
        criteria_type = normalize_text(payload.get("type"))
        if criteria_type != CRITERIA_TYPE_PERCENTAGE:
            criteria_type = CRITERIA_TYPE_CGPA
        return cls(
            type=criteria_type,
            min_cgpa=coerce_float(payload.get("minCgpa")),
            min_percentage=coerce_float(payload.get("minPercentage")),
            allowed_years=_year_labels(payload.get("allowedYears")),
            note=clean_text(payload.get("note")),
        )


def _year_labels(value: Any) -> tuple[str, ...]:
    # Cohort years may be stored as numbers (3) or labels ("3rd Year").
    if isinstance(value, (list, tuple)):
        return tuple(label for label in (clean_text(item) for item in value) if label)
    return tuple(as_string_list(value))


def _coerce_criteria(
    criteria: EligibilityCriteria | Mapping[str, Any] | None,
) -> EligibilityCriteria | None:
    if criteria is None or isinstance(criteria, EligibilityCriteria):
        return criteria
    return EligibilityCriteria.from_mapping(criteria)


def _year_allowed(current_year: str | None, allowed_years: tuple[str, ...]) -> bool:
    if not allowed_years or not current_year:
        return True
    wanted = normalize_text(current_year)
    return any(normalize_text(year) == wanted for year in allowed_years)


def _percentage_reasons(
    profile: StudentProfile, min_percentage: float | None, factor: float
) -> list[str]:
    if min_percentage is None:
        return []

    tenth = coerce_float(profile.tenth_percentage)
    twelfth = coerce_float(profile.twelfth_percentage)
    cgpa = coerce_float(profile.cgpa)
    if tenth is None or twelfth is None or cgpa is None:
        return [INVALID_ACADEMIC_RECORD]

    reasons: list[str] = []
    if tenth < min_percentage:
        reasons.append(TENTH_BELOW_MIN)
    if twelfth < min_percentage:
        reasons.append(TWELFTH_BELOW_MIN)
    if cgpa * factor < min_percentage:
        reasons.append(CGPA_PERCENT_BELOW_MIN)
    return reasons


def _cgpa_reasons(profile: StudentProfile, min_cgpa: float | None) -> list[str]:
    if min_cgpa is None:
        return []
    cgpa = coerce_float(profile.cgpa)
    if cgpa is None:
        return [INVALID_ACADEMIC_RECORD]
    if cgpa < min_cgpa:
        return [CGPA_BELOW_MIN]
    return []


def eligibility_reasons(
    profile: StudentProfile | Mapping[str, Any] | None,
    criteria: EligibilityCriteria | Mapping[str, Any] | None,
    *,
    settings: FilterSettings | None = None,
) -> list[str]:
    """Reason codes explaining why ``profile`` fails ``criteria``; empty when eligible.

    A missing profile (anonymous or faculty viewer) or missing criteria is
    open access. Values that cannot be parsed as numbers fail any criterion
    that needs them.
    """

    resolved = _coerce_criteria(criteria)
    if isinstance(profile, Mapping):
        profile = StudentProfile.from_record(profile)
    if profile is None or resolved is None:
        return []
    active_settings = settings or FilterSettings.baseline()

    reasons: list[str] = []
    if not _year_allowed(profile.current_year, resolved.allowed_years):
        reasons.append(YEAR_NOT_ALLOWED)

    if resolved.type == CRITERIA_TYPE_PERCENTAGE:
        reasons.extend(
            _percentage_reasons(
                profile,
                resolved.min_percentage,
                active_settings.cgpa_percentage_factor,
            )
        )
    else:
        reasons.extend(_cgpa_reasons(profile, resolved.min_cgpa))
    return reasons


def is_eligible(
    profile: StudentProfile | Mapping[str, Any] | None,
    criteria: EligibilityCriteria | Mapping[str, Any] | None,
    *,
    settings: FilterSettings | None = None,
) -> bool:
    return not eligibility_reasons(profile, criteria, settings=settings)


def _format_number(value: float) -> str:
    return f"{value:g}"


def describe_criteria(
    criteria: EligibilityCriteria | Mapping[str, Any] | None,
    *,
    settings: FilterSettings | None = None,
) -> list[str]:
    """Human-readable criteria lines for detail views; empty when nothing is specified."""

    resolved = _coerce_criteria(criteria)
    if resolved is None:
        return []
    factor = (settings or FilterSettings.baseline()).cgpa_percentage_factor

    lines: list[str] = []
    if resolved.type == CRITERIA_TYPE_PERCENTAGE and resolved.min_percentage is not None:
        lines.append(
            f"Minimum Percentage: {_format_number(resolved.min_percentage)}% "
            f"in each of 10th, 12th, and CGPA×{_format_number(factor)}"
        )
    if resolved.type == CRITERIA_TYPE_CGPA and resolved.min_cgpa is not None:
        lines.append(f"Minimum CGPA: {_format_number(resolved.min_cgpa)}")
    if resolved.allowed_years:
        lines.append(f"Allowed Years: {', '.join(resolved.allowed_years)}")
    if resolved.note:
        lines.append(resolved.note)
    return lines
