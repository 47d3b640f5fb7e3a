from __future__ import annotations

import pytest

from src.taxonomy.departments import (
    AI_DEPARTMENT,
    DEPARTMENT_DOMAINS,
    canonical_department,
    department_domains,
    known_departments,
)


def test_taxonomy_covers_every_department_with_eight_to_thirteen_domains() -> None:
    assert known_departments() == [
        "Computer Science",
        "Information Technology",
        "Electrical Engineering",
        "Electronics and Telecommunication",
        "Mechanical Engineering",
        "Civil Engineering",
        "Artificial Intelligence",
    ]
    for department, domains in DEPARTMENT_DOMAINS.items():
        assert 8 <= len(domains) <= 13, department
        assert len(set(domains)) == len(domains), department


def test_machine_learning_terms_live_only_under_the_ai_department() -> None:
    owners = [
        department
        for department, domains in DEPARTMENT_DOMAINS.items()
        if "Machine Learning" in domains or "Artificial Intelligence" in domains
    ]

    assert owners == [AI_DEPARTMENT]


def test_taxonomy_is_read_only() -> None:
    with pytest.raises(TypeError):
        DEPARTMENT_DOMAINS["Biotechnology"] = ("Genomics",)  # type: ignore[index]


def test_department_lookup_tolerates_case_and_whitespace() -> None:
    assert canonical_department("  computer   science ") == "Computer Science"
    assert department_domains("civil engineering")[0] == "Structural Engineering"
    assert canonical_department("Biotechnology") is None
    assert department_domains(None) == ()
