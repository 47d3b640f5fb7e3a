"""Profile completeness checks feeding the notification bell."""

from src.profiles.completeness import (
    CompletionReport,
    ProfileNotification,
    build_profile_notification,
    check_completion,
    generate_notification_message,
)

__all__ = [
    "CompletionReport",
    "ProfileNotification",
    "build_profile_notification",
    "check_completion",
    "generate_notification_message",
]
