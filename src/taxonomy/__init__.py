"""Department to subject-domain taxonomy shared by every matcher."""

from src.taxonomy.departments import (
    AI_DEPARTMENT,
    AI_TERMS,
    DEPARTMENT_DOMAINS,
    TAXONOMY_VERSION,
    canonical_department,
    department_domains,
    known_departments,
)

__all__ = [
    "AI_DEPARTMENT",
    "AI_TERMS",
    "DEPARTMENT_DOMAINS",
    "TAXONOMY_VERSION",
    "canonical_department",
    "department_domains",
    "known_departments",
]
