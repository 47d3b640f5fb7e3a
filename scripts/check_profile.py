from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.io.records import load_filter_settings, load_profile
from src.profiles.completeness import (
    REQUIRED_FIELDS_BY_ROLE,
    check_completion,
    generate_notification_message,
)

logger = logging.getLogger("check_profile")

DEFAULT_SETTINGS_PATH = ROOT_DIR / "data" / "processed" / "filter_settings.json"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Report missing required profile fields.")
    parser.add_argument("--profile", type=Path, required=True, help="User profile (.json).")
    parser.add_argument(
        "--role",
        choices=tuple(REQUIRED_FIELDS_BY_ROLE),
        default=None,
        help="Profile role. Defaults to the profile's own 'role' field.",
    )
    parser.add_argument("--settings", type=Path, default=DEFAULT_SETTINGS_PATH)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        profile = load_profile(args.profile)
        settings = load_filter_settings(args.settings)
        role = args.role or str((profile or {}).get("role") or "student")
        report = check_completion(profile, role)
    except (FileNotFoundError, ValueError):
        logger.exception("Could not check profile %s", args.profile)
        return 1

    if report.is_complete:
        print("Profile complete.")
        return 0

    print(f"Missing fields ({len(report.missing_fields)}):")
    for label in report.missing_fields:
        print(f"- {label}")
    message = generate_notification_message(report.missing_fields, role, settings=settings)
    if message:
        print(message)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
