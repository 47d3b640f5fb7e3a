from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Mapping

from src.rank.settings import FilterSettings

logger = logging.getLogger(__name__)

STUDENT_REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("firstName", "First Name"),
    ("lastName", "Last Name"),
    ("email", "Email"),
    ("phoneNumber", "Phone Number"),
    ("department", "Department"),
    ("currentYear", "Current Year"),
    ("tenthPercentage", "10th Percentage"),
    ("twelfthPercentage", "12th Percentage"),
    ("cgpa", "CGPA"),
    ("passingYear", "Passing Year"),
    ("previousProjects", "Previous Projects"),
    ("githubLink", "GitHub Profile Link"),
    ("linkedinLink", "LinkedIn Profile Link"),
    ("cocubesScore", "CoCubes Score"),
    ("leetcodeLink", "LeetCode Profile Link"),
    ("codechefLink", "CodeChef Profile Link"),
)

FACULTY_REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("firstName", "First Name"),
    ("lastName", "Last Name"),
    ("department", "Department"),
    ("designation", "Designation"),
    ("specialization", "Specialization"),
    ("experience", "Years of Experience"),
    ("qualifications", "Qualifications"),
    ("contactEmail", "Contact Email"),
)

REQUIRED_FIELDS_BY_ROLE = {
    "student": STUDENT_REQUIRED_FIELDS,
    "faculty": FACULTY_REQUIRED_FIELDS,
}

PHONE_LABEL = "Phone Number"
INVALID_PHONE_LABEL = "Valid Phone Number (10 digits)"
MISSING_RECORD_LABEL = "All profile information"
PHONE_PATTERN = re.compile(r"[0-9]{10}")

FACULTY_MESSAGE = "Your profile is incomplete. Please complete it."
STUDENT_BASE_MESSAGE = (
    "Your profile is not complete. Please complete it to find better opportunities "
    "and connect with other people."
)


@dataclass(frozen=True, slots=True)
class CompletionReport:
    is_complete: bool
    missing_fields: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ProfileNotification:
    message: str
    created_at: datetime
    id: str = "profile-incomplete"
    type: str = "profile"
    priority: str = "high"
    missing_fields: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "message": self.message,
            "createdAt": self.created_at.isoformat(),
            "priority": self.priority,
            "missingFields": list(self.missing_fields),
        }


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def _phone_text(value: Any) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value if isinstance(value, str) else ""


def check_completion(record: Mapping[str, Any] | None, role: str) -> CompletionReport:
    """Report which required fields of ``record`` are still empty for ``role``.

    Labels come back in declaration order. A present student phone number that
    is not exactly ten digits adds a separate format label.
    """

    required = REQUIRED_FIELDS_BY_ROLE.get(role)
    if required is None:
        raise ValueError(
            f"Unknown profile role '{role}'. Expected one of {', '.join(REQUIRED_FIELDS_BY_ROLE)}."
        )
    if record is None:
        return CompletionReport(is_complete=False, missing_fields=(MISSING_RECORD_LABEL,))

    missing = [label for key, label in required if _is_blank(record.get(key))]

    if role == "student":
        phone = record.get("phoneNumber")
        if not _is_blank(phone) and not PHONE_PATTERN.fullmatch(_phone_text(phone)):
            if PHONE_LABEL not in missing:
                missing.append(INVALID_PHONE_LABEL)

    return CompletionReport(is_complete=not missing, missing_fields=tuple(missing))


def generate_notification_message(
    missing_fields: list[str] | tuple[str, ...],
    role: str = "student",
    *,
    settings: FilterSettings | None = None,
) -> str | None:
    if not missing_fields:
        return None
    if role == "faculty":
        return FACULTY_MESSAGE

    list_limit = (settings or FilterSettings.baseline()).notification_list_limit
    if len(missing_fields) <= list_limit:
        return f"{STUDENT_BASE_MESSAGE} Missing: {', '.join(missing_fields)}."
    return f"{STUDENT_BASE_MESSAGE} You have {len(missing_fields)} fields to complete."


def build_profile_notification(
    record: Mapping[str, Any] | None,
    *,
    now: datetime | None = None,
    settings: FilterSettings | None = None,
) -> ProfileNotification | None:
    """Build the high-priority "complete your profile" notification, if one is due.

    The checker is chosen from ``record["role"]``; records without a known role
    produce no notification.
    """

    if record is None:
        return None
    role = record.get("role")
    if not isinstance(role, str) or role not in REQUIRED_FIELDS_BY_ROLE:
        logger.debug("No profile notification for role %r", role)
        return None

    report = check_completion(record, role)
    message = generate_notification_message(report.missing_fields, role, settings=settings)
    if message is None:
        return None
    return ProfileNotification(
        message=message,
        created_at=now or datetime.now(tz=UTC),
        missing_fields=report.missing_fields,
    )
