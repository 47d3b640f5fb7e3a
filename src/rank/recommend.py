from __future__ import annotations

from typing import Any, Iterable, Mapping

from src.normalize.schema import InternshipRecord
from src.rank.domain_matcher import lists_department, matches
from src.rank.eligibility import StudentProfile
from src.rank.settings import FilterSettings
from src.rank.visibility import ViewingContext


def _targets_department(record: InternshipRecord, department: str) -> bool:
    if record.departments:
        return lists_department(record.departments, department)
    # Older postings without a departments list fall back to domain inference;
    # with no domains either there is nothing to recommend on.
    return any(matches(domain, department) for domain in record.domains)


def recommend_for_internship(
    internships: Iterable[Mapping[str, Any]],
    current_id: str,
    profile: StudentProfile | Mapping[str, Any] | None,
    context: ViewingContext,
    *,
    settings: FilterSettings | None = None,
) -> list[Mapping[str, Any]]:
    """Other open internships to show beside a detail page, in input order."""

    limit = (settings or FilterSettings.baseline()).recommendation_limit
    student = profile if not isinstance(profile, Mapping) else StudentProfile.from_record(profile)
    department = student.department if student is not None else None
    now = context.resolved_now()
    current = str(current_id).strip()

    picked: list[Mapping[str, Any]] = []
    for payload in internships:
        if not isinstance(payload, Mapping):
            continue
        record = InternshipRecord.from_mapping(payload)
        if record.internship_id == current:
            continue
        if record.internship_id in context.applied_internship_ids:
            continue
        if record.is_expired(now):
            continue
        if department and not _targets_department(record, department):
            continue
        picked.append(payload)
        if len(picked) >= limit:
            break
    return picked
