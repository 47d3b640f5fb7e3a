from __future__ import annotations

from datetime import UTC, datetime

import pytest

from src.profiles.completeness import (
    FACULTY_MESSAGE,
    INVALID_PHONE_LABEL,
    MISSING_RECORD_LABEL,
    STUDENT_BASE_MESSAGE,
    build_profile_notification,
    check_completion,
    generate_notification_message,
)
from src.rank.settings import FilterSettings


def _complete_student() -> dict[str, object]:
    return {
        "role": "student",
        "firstName": "Asha",
        "lastName": "Kulkarni",
        "email": "asha@example.edu",
        "phoneNumber": "9876543210",
        "department": "Computer Science",
        "currentYear": "3rd Year",
        "tenthPercentage": 91,
        "twelfthPercentage": 88.5,
        "cgpa": 8.4,
        "passingYear": 2027,
        "previousProjects": "Campus events app",
        "githubLink": "https://github.com/asha",
        "linkedinLink": "https://linkedin.com/in/asha",
        "cocubesScore": 0,
        "leetcodeLink": "https://leetcode.com/asha",
        "codechefLink": "https://codechef.com/users/asha",
    }


def _complete_faculty() -> dict[str, object]:
    return {
        "role": "faculty",
        "firstName": "Ravi",
        "lastName": "Menon",
        "department": "Mechanical Engineering",
        "designation": "Associate Professor",
        "specialization": "Thermal Engineering",
        "experience": 12,
        "qualifications": "PhD",
        "contactEmail": "ravi@example.edu",
    }


def test_complete_student_profile_has_no_missing_fields() -> None:
    report = check_completion(_complete_student(), "student")

    assert report.is_complete is True
    assert report.missing_fields == ()


def test_missing_fields_are_reported_in_declaration_order() -> None:
    profile = _complete_student()
    profile["cgpa"] = None
    profile["githubLink"] = "   "
    profile["email"] = ""
    profile["previousProjects"] = []

    report = check_completion(profile, "student")

    assert report.is_complete is False
    assert report.missing_fields == ("Email", "CGPA", "Previous Projects", "GitHub Profile Link")


def test_zero_and_nan_are_treated_differently() -> None:
    profile = _complete_student()
    profile["cocubesScore"] = 0
    profile["tenthPercentage"] = float("nan")

    assert check_completion(profile, "student").missing_fields == ("10th Percentage",)


@pytest.mark.parametrize("phone", ["12345", "98765 43210", "98765432101", "phone", "9876543210\n"])
def test_badly_formatted_phone_adds_format_label(phone: str) -> None:
    profile = _complete_student()
    profile["phoneNumber"] = phone

    assert check_completion(profile, "student").missing_fields == (INVALID_PHONE_LABEL,)


def test_missing_phone_is_reported_once() -> None:
    profile = _complete_student()
    profile["phoneNumber"] = None

    assert check_completion(profile, "student").missing_fields == ("Phone Number",)


def test_numeric_phone_number_is_accepted() -> None:
    profile = _complete_student()
    profile["phoneNumber"] = 9876543210

    assert check_completion(profile, "student").is_complete is True


def test_faculty_profile_uses_faculty_fields_without_phone_rule() -> None:
    profile = _complete_faculty()
    profile["phoneNumber"] = "bad"

    assert check_completion(profile, "faculty").is_complete is True

    del profile["designation"]
    assert check_completion(profile, "faculty").missing_fields == ("Designation",)


def test_missing_record_and_unknown_role() -> None:
    assert check_completion(None, "student").missing_fields == (MISSING_RECORD_LABEL,)
    with pytest.raises(ValueError, match="Unknown profile role"):
        check_completion({}, "admin")


def test_student_message_lists_few_fields_and_counts_many() -> None:
    few = generate_notification_message(["Email", "CGPA"], "student")
    many = generate_notification_message(["A", "B", "C", "D"], "student")

    assert few == f"{STUDENT_BASE_MESSAGE} Missing: Email, CGPA."
    assert many == f"{STUDENT_BASE_MESSAGE} You have 4 fields to complete."
    assert generate_notification_message([], "student") is None


def test_message_list_limit_is_configurable() -> None:
    message = generate_notification_message(
        ["A", "B"], "student", settings=FilterSettings(notification_list_limit=1)
    )

    assert message == f"{STUDENT_BASE_MESSAGE} You have 2 fields to complete."


def test_faculty_message_is_generic() -> None:
    assert generate_notification_message(["Designation"], "faculty") == FACULTY_MESSAGE


def test_profile_notification_is_built_only_when_fields_are_missing() -> None:
    now = datetime(2026, 3, 1, 9, 30, tzinfo=UTC)
    profile = _complete_student()
    profile["cgpa"] = ""

    notification = build_profile_notification(profile, now=now)

    assert notification is not None
    assert notification.to_dict() == {
        "id": "profile-incomplete",
        "type": "profile",
        "message": f"{STUDENT_BASE_MESSAGE} Missing: CGPA.",
        "createdAt": "2026-03-01T09:30:00+00:00",
        "priority": "high",
        "missingFields": ["CGPA"],
    }
    assert build_profile_notification(_complete_student(), now=now) is None
    assert build_profile_notification(_complete_faculty(), now=now) is None


def test_profile_notification_ignores_records_without_known_role() -> None:
    assert build_profile_notification(None) is None
    assert build_profile_notification({"firstName": "Anon"}) is None
    assert build_profile_notification({"role": ["student"]}) is None
