from __future__ import annotations

from typing import Any, Iterable

import pandas as pd

from src.normalize.values import coerce_timestamp
from src.rank.domain_matcher import infer_target_departments
from src.rank.visibility import (
    DEADLINE_PASSED,
    DEPARTMENT_MISMATCH,
    ROLE_STUDENT,
    AnnotatedInternship,
    count_active_and_expired,
)

NOT_STUDENT_MESSAGE = "Only students can apply for internships"
ALREADY_APPLIED_MESSAGE = "You have already applied to this internship."
DEADLINE_PASSED_MESSAGE = (
    "This internship application deadline has passed and is no longer available"
)
NOT_ELIGIBLE_MESSAGE = (
    "You are not eligible to apply for this internship based on the eligibility criteria."
)


def format_deadline(value: Any, *, expired: bool = False) -> str:
    deadline = coerce_timestamp(value)
    if deadline is None:
        return "No deadline"
    prefix = "Expired" if expired else "Deadline"
    stamp = deadline.strftime("%d/%m/%Y %I:%M %p")
    return f"{prefix}: {stamp}"


def listing_heading(
    results: Iterable[AnnotatedInternship],
    *,
    show_all: bool,
    show_expired: bool,
    department: str | None,
) -> str:
    items = list(results)
    if show_all:
        base = "All Internships"
    elif department:
        base = f"{department} Internships"
    else:
        base = "Internships"

    active, expired = count_active_and_expired(items)
    if show_expired and expired > 0:
        return f"{base} ({active} Active, {expired} Expired)"
    return f"{base} ({len(items)} Found)"


def badge_labels(item: AnnotatedInternship, *, show_all: bool) -> list[str]:
    labels: list[str] = []
    if item.is_expired:
        labels.append("Expired")
    if show_all and not item.can_apply and item.department_mismatch:
        labels.append("Department mismatch")
    if item.has_matching_domains:
        labels.append("Your domains match!")
    return labels


def apply_block_message(
    item: AnnotatedInternship, *, role: str, department: str | None
) -> str | None:
    """Message shown instead of applying, or ``None`` when the apply button is live."""

    if role != ROLE_STUDENT:
        return NOT_STUDENT_MESSAGE
    if item.has_applied:
        return ALREADY_APPLIED_MESSAGE
    if DEADLINE_PASSED in item.reasons:
        return DEADLINE_PASSED_MESSAGE
    if DEPARTMENT_MISMATCH in item.reasons:
        targets = ", ".join(item.record.departments or item.record.domains) or "Not specified"
        return (
            "You cannot apply to this internship as it doesn't match your department "
            f"({department or 'Unknown'}). This internship is specifically for: {targets}."
        )
    if not item.is_eligible:
        return NOT_ELIGIBLE_MESSAGE
    return None


def target_departments(item: AnnotatedInternship) -> list[str]:
    if item.record.departments:
        return list(item.record.departments)
    return infer_target_departments(item.record.domains)


def reasons_to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value if str(item).strip())
    return str(value)


def listing_table(results: Iterable[AnnotatedInternship], *, show_all: bool) -> pd.DataFrame:
    rows = []
    for item in results:
        rows.append(
            {
                "title": item.record.title,
                "company": item.record.company_name,
                "domains": ", ".join(item.record.domains),
                "deadline": format_deadline(item.record.first_round_date, expired=item.is_expired),
                "can_apply": item.can_apply,
                "badges": ", ".join(badge_labels(item, show_all=show_all)),
                "reasons": reasons_to_text(item.reasons),
            }
        )
    return pd.DataFrame(
        rows,
        columns=["title", "company", "domains", "deadline", "can_apply", "badges", "reasons"],
    )
