"""Listing filter: which internships a viewer sees and what each one allows.

`filter_and_annotate` is a pure function of the internship list, the viewer's
profile and an immutable :class:`ViewingContext`. It never reorders its input
and never mutates the stored records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Mapping

import pandas as pd

from src.normalize.schema import InternshipRecord
from src.normalize.values import coerce_timestamp, normalize_text
from src.rank.domain_matcher import has_matching_domains, is_department_compatible, lists_department
from src.rank.eligibility import StudentProfile, eligibility_reasons
from src.rank.settings import FilterSettings

logger = logging.getLogger(__name__)

ROLE_STUDENT = "student"
ROLE_FACULTY = "faculty"
ROLE_ANONYMOUS = "anonymous"
VIEWER_ROLES = (ROLE_STUDENT, ROLE_FACULTY, ROLE_ANONYMOUS)

DEPARTMENT_MISMATCH = "DEPARTMENT_MISMATCH"
DEADLINE_PASSED = "DEADLINE_PASSED"

ANNOTATION_COLUMNS = [
    "id",
    "title",
    "companyName",
    "domains",
    "departments",
    "firstRoundDate",
    "canApply",
    "departmentMismatch",
    "isExpired",
    "isEligible",
    "hasMatchingDomains",
    "hasApplied",
    "reasons",
]
_FLAG_COLUMNS = (
    "canApply",
    "departmentMismatch",
    "isExpired",
    "isEligible",
    "hasMatchingDomains",
    "hasApplied",
)


@dataclass(frozen=True, slots=True)
class ViewingContext:
    """Per-request view state.

    `now` is the clock used for deadline checks; leaving it unset reads the
    current UTC time once per call.
    """

    role: str = ROLE_ANONYMOUS
    show_all: bool = False
    show_expired: bool = False
    search_term: str = ""
    applied_internship_ids: frozenset[str] = field(default_factory=frozenset)
    now: datetime | date | str | None = None

    def __post_init__(self) -> None:
        if self.role not in VIEWER_ROLES:
            raise ValueError(
                f"Unknown viewer role '{self.role}'. Expected one of {', '.join(VIEWER_ROLES)}."
            )
        ids = self.applied_internship_ids or ()
        if isinstance(ids, str):
            ids = (ids,)
        applied = frozenset(str(item).strip() for item in ids if str(item).strip())
        object.__setattr__(self, "applied_internship_ids", applied)
        object.__setattr__(self, "search_term", normalize_text(self.search_term))

    def resolved_now(self) -> pd.Timestamp:
        if self.now is None:
            return pd.Timestamp.now(tz="UTC")
        resolved = coerce_timestamp(self.now)
        if resolved is None:
            raise ValueError(f"Could not interpret viewing time {self.now!r}.")
        return resolved


@dataclass(frozen=True, slots=True)
class AnnotatedInternship:
    internship: Mapping[str, Any]
    record: InternshipRecord
    can_apply: bool
    department_mismatch: bool
    is_expired: bool
    is_eligible: bool
    has_matching_domains: bool
    has_applied: bool
    reasons: tuple[str, ...] = ()

    @property
    def internship_id(self) -> str:
        return self.record.internship_id

    def to_dict(self) -> dict[str, Any]:
        payload = dict(self.internship)
        payload.update(
            {
                "domains": list(self.record.domains),
                "canApply": self.can_apply,
                "departmentMismatch": self.department_mismatch,
                "isExpired": self.is_expired,
                "isEligible": self.is_eligible,
                "hasMatchingDomains": self.has_matching_domains,
                "hasApplied": self.has_applied,
                "reasons": list(self.reasons),
            }
        )
        return payload


def _resolve_profile(profile: StudentProfile | Mapping[str, Any] | None) -> StudentProfile | None:
    if profile is None or isinstance(profile, StudentProfile):
        return profile
    return StudentProfile.from_record(profile)


def _matches_search(record: InternshipRecord, search_term: str) -> bool:
    if not search_term:
        return True
    if search_term in normalize_text(record.title):
        return True
    if search_term in normalize_text(record.company_name):
        return True
    return any(search_term in normalize_text(domain) for domain in record.domains)


def _in_department_view(record: InternshipRecord, department: str | None) -> bool:
    # Without a known department there is nothing to scope by.
    if not department:
        return True
    return bool(record.departments) and lists_department(record.departments, department)


def _annotate(
    payload: Mapping[str, Any],
    record: InternshipRecord,
    *,
    context: ViewingContext,
    profile: StudentProfile | None,
    now: pd.Timestamp,
    strict: bool,
    settings: FilterSettings | None,
) -> AnnotatedInternship:
    department = profile.department if profile is not None else None
    eligibility_profile = profile if context.role == ROLE_STUDENT else None

    compatible = is_department_compatible(record, department)
    eligibility = eligibility_reasons(
        eligibility_profile, record.eligibility_criteria, settings=settings
    )
    expired = record.is_expired(now)

    reasons: list[str] = []
    if not compatible:
        reasons.append(DEPARTMENT_MISMATCH)
    reasons.extend(eligibility)
    if expired:
        reasons.append(DEADLINE_PASSED)

    interests = profile.interested_domains if profile is not None else ()
    return AnnotatedInternship(
        internship=payload,
        record=record,
        can_apply=not reasons if strict else True,
        department_mismatch=not compatible,
        is_expired=expired,
        is_eligible=not eligibility,
        has_matching_domains=has_matching_domains(interests, record.domains),
        has_applied=record.internship_id in context.applied_internship_ids,
        reasons=tuple(reasons),
    )


def filter_and_annotate(
    internships: Iterable[Mapping[str, Any]],
    context: ViewingContext,
    profile: StudentProfile | Mapping[str, Any] | None = None,
    *,
    settings: FilterSettings | None = None,
) -> list[AnnotatedInternship]:
    """Filter a listing for ``context`` and annotate every surviving record.

    Exclusion order: already applied (department view only), expired (unless
    ``show_expired``), search miss, then department scoping (department view
    only). Under ``show_all`` ``can_apply`` requires department compatibility,
    eligibility and an open deadline; in the department view it is always true.
    """

    now = context.resolved_now()
    student = _resolve_profile(profile)
    department = student.department if student is not None else None

    results: list[AnnotatedInternship] = []
    skipped = 0
    for payload in internships:
        if not isinstance(payload, Mapping):
            skipped += 1
            continue
        record = InternshipRecord.from_mapping(payload)

        if not context.show_all and record.internship_id in context.applied_internship_ids:
            continue
        if record.is_expired(now) and not context.show_expired:
            continue
        if not _matches_search(record, context.search_term):
            continue
        if not context.show_all and not _in_department_view(record, department):
            continue

        results.append(
            _annotate(
                payload,
                record,
                context=context,
                profile=student,
                now=now,
                strict=context.show_all,
                settings=settings,
            )
        )

    if skipped:
        logger.warning("Skipped %d internship entries that were not mappings.", skipped)
    logger.debug(
        "Filtered listing role=%s show_all=%s show_expired=%s kept=%d",
        context.role,
        context.show_all,
        context.show_expired,
        len(results),
    )
    return results


def evaluate_internship(
    internship: Mapping[str, Any],
    context: ViewingContext,
    profile: StudentProfile | Mapping[str, Any] | None = None,
    *,
    settings: FilterSettings | None = None,
) -> AnnotatedInternship:
    """Annotate a single internship for a detail view.

    Nothing is excluded here and ``can_apply`` always applies the full rule:
    compatible department, eligible record and an open deadline.
    """

    return _annotate(
        internship,
        InternshipRecord.from_mapping(internship),
        context=context,
        profile=_resolve_profile(profile),
        now=context.resolved_now(),
        strict=True,
        settings=settings,
    )


def count_active_and_expired(results: Iterable[AnnotatedInternship]) -> tuple[int, int]:
    active = 0
    expired = 0
    for item in results:
        if item.is_expired:
            expired += 1
        else:
            active += 1
    return active, expired


def annotations_to_frame(results: Iterable[AnnotatedInternship]) -> pd.DataFrame:
    rows = []
    for item in results:
        deadline = item.record.first_round_date
        rows.append(
            {
                "id": item.internship_id,
                "title": item.record.title,
                "companyName": item.record.company_name,
                "domains": list(item.record.domains),
                "departments": list(item.record.departments),
                "firstRoundDate": deadline.isoformat() if deadline is not None else None,
                "canApply": item.can_apply,
                "departmentMismatch": item.department_mismatch,
                "isExpired": item.is_expired,
                "isEligible": item.is_eligible,
                "hasMatchingDomains": item.has_matching_domains,
                "hasApplied": item.has_applied,
                "reasons": list(item.reasons),
            }
        )
    # Object dtype keeps missing deadlines as None instead of NaN.
    frame = pd.DataFrame(rows, columns=ANNOTATION_COLUMNS, dtype=object)
    return frame.astype({column: bool for column in _FLAG_COLUMNS})
