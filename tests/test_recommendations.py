from __future__ import annotations

from src.rank.eligibility import StudentProfile
from src.rank.recommend import recommend_for_internship
from src.rank.settings import FilterSettings
from src.rank.visibility import ViewingContext

NOW = "2026-03-01T00:00:00Z"


def _listing() -> list[dict[str, object]]:
    return [
        {"id": "current", "departments": ["Computer Science"]},
        {"id": "applied", "departments": ["Computer Science"]},
        {"id": "old", "departments": ["Computer Science"], "firstRoundDate": "2026-01-10"},
        {"id": "ece", "departments": ["Electronics and Telecommunication"]},
        {"id": "cloud", "domains": ["Cloud Computing"]},
        {"id": "ml", "domains": ["Machine Learning"]},
        {"id": "bare"},
        {"id": "cs-1", "departments": ["computer science"]},
        {"id": "cs-2", "departments": ["Computer Science"], "firstRoundDate": "2026-06-01"},
        {"id": "cs-3", "departments": ["Computer Science"]},
    ]


def test_recommendations_skip_current_applied_expired_and_other_departments() -> None:
    context = ViewingContext(role="student", applied_internship_ids={"applied"}, now=NOW)
    profile = StudentProfile(department="Computer Science")

    picked = recommend_for_internship(_listing(), "current", profile, context)

    assert [item["id"] for item in picked] == ["cloud", "cs-1", "cs-2"]


def test_recommendation_limit_comes_from_settings() -> None:
    context = ViewingContext(role="student", applied_internship_ids={"applied"}, now=NOW)
    profile = {"department": "Computer Science"}

    picked = recommend_for_internship(
        _listing(),
        "current",
        profile,
        context,
        settings=FilterSettings(recommendation_limit=5),
    )

    assert [item["id"] for item in picked] == ["cloud", "cs-1", "cs-2", "cs-3"]


def test_ai_department_gets_machine_learning_postings() -> None:
    context = ViewingContext(role="student", now=NOW)
    profile = StudentProfile(department="Artificial Intelligence")

    picked = recommend_for_internship(_listing(), "current", profile, context)

    assert [item["id"] for item in picked] == ["ml"]


def test_viewer_without_department_gets_first_open_postings() -> None:
    context = ViewingContext(role="anonymous", now=NOW)

    picked = recommend_for_internship(_listing(), "current", None, context)

    assert [item["id"] for item in picked] == ["applied", "ece", "cloud"]
