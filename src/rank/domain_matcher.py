"""Department compatibility rules for free-text internship domains.

Every view that needs to know whether a domain string belongs to a department
goes through :func:`matches`. Rules are evaluated in order and the first rule
that decides wins:

1. exact (normalized) equality with a taxonomy domain of the department;
2. machine-learning vocabulary targets the AI department and nothing else;
3. bidirectional substring containment against the department's domains.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from src.normalize.schema import InternshipRecord
from src.normalize.values import as_string_list, normalize_text
from src.taxonomy.departments import (
    AI_DEPARTMENT,
    AI_TERMS,
    DEPARTMENT_DOMAINS,
    canonical_department,
    department_domains,
)

# Short acronyms only count as whole words ("email" must not look like "ai").
_AI_ACRONYMS = frozenset(term for term in AI_TERMS if " " not in term)
_AI_PHRASES = tuple(term for term in AI_TERMS if " " in term)
_WORD_PATTERN = re.compile(r"[a-z0-9]+")


def mentions_ai_term(domain: Any) -> bool:
    normalized = normalize_text(domain)
    if not normalized:
        return False
    if any(phrase in normalized for phrase in _AI_PHRASES):
        return True
    return not _AI_ACRONYMS.isdisjoint(_WORD_PATTERN.findall(normalized))


def matches(domain: Any, department: Any) -> bool:
    normalized_domain = normalize_text(domain)
    department_name = canonical_department(department)
    if not normalized_domain or department_name is None:
        return False

    canonical = [normalize_text(item) for item in department_domains(department_name)]
    if normalized_domain in canonical:
        return True

    if mentions_ai_term(normalized_domain):
        return department_name == AI_DEPARTMENT

    return any(
        candidate in normalized_domain or normalized_domain in candidate
        for candidate in canonical
    )


def _as_record(internship: InternshipRecord | Mapping[str, Any]) -> InternshipRecord:
    if isinstance(internship, InternshipRecord):
        return internship
    return InternshipRecord.from_mapping(internship)


def lists_department(departments: Iterable[str], department: Any) -> bool:
    wanted = normalize_text(department)
    return bool(wanted) and any(normalize_text(item) == wanted for item in departments)


def is_department_compatible(
    internship: InternshipRecord | Mapping[str, Any], department: Any
) -> bool:
    """Decide whether students of ``department`` are an intended audience.

    The explicit ``departments`` list wins whenever it is non-empty; domain
    inference is only a fallback for internships posted without one. An
    internship with neither is open to every department, and a viewer without
    a department is never flagged as a mismatch.
    """

    record = _as_record(internship)
    student_department = department.strip() if isinstance(department, str) else ""
    if not student_department:
        return True

    if record.departments:
        return lists_department(record.departments, student_department)

    if not record.domains:
        return True
    return any(matches(domain, student_department) for domain in record.domains)


def infer_target_departments(domains: Any) -> list[str]:
    """List the departments a domain list targets, in taxonomy order."""

    targets: set[str] = set()
    for domain in as_string_list(domains):
        if mentions_ai_term(domain):
            targets.add(AI_DEPARTMENT)
            continue
        for department in DEPARTMENT_DOMAINS:
            if department != AI_DEPARTMENT and matches(domain, department):
                targets.add(department)
    return [department for department in DEPARTMENT_DOMAINS if department in targets]


def has_matching_domains(interests: Iterable[Any] | Any, domains: Iterable[Any] | Any) -> bool:
    interest_terms = [normalize_text(item) for item in as_string_list(interests)]
    domain_terms = [normalize_text(item) for item in as_string_list(domains)]
    interest_terms = [term for term in interest_terms if term]
    domain_terms = [term for term in domain_terms if term]
    return any(
        interest in domain or domain in interest
        for interest in interest_terms
        for domain in domain_terms
    )
