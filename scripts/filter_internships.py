from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.io.records import (
    load_applied_ids,
    load_filter_settings,
    load_internships,
    load_profile,
    sort_by_posted_date,
    write_json_atomic,
)
from src.rank.visibility import (
    VIEWER_ROLES,
    ViewingContext,
    annotations_to_frame,
    count_active_and_expired,
    filter_and_annotate,
)

logger = logging.getLogger("filter_internships")

DEFAULT_SETTINGS_PATH = ROOT_DIR / "data" / "processed" / "filter_settings.json"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Filter and annotate an internship listing for one viewer."
    )
    parser.add_argument(
        "--internships",
        type=Path,
        required=True,
        help="Internship records (.json or .parquet).",
    )
    parser.add_argument("--profile", type=Path, default=None, help="Viewer profile (.json).")
    parser.add_argument(
        "--applied",
        type=Path,
        default=None,
        help="Applied internship ids or application documents (.json).",
    )
    parser.add_argument("--role", choices=VIEWER_ROLES, default="student")
    parser.add_argument("--show-all", action="store_true")
    parser.add_argument("--show-expired", action="store_true")
    parser.add_argument("--search", type=str, default="")
    parser.add_argument(
        "--now",
        type=str,
        default=None,
        help="ISO timestamp used for deadline checks. Defaults to current UTC time.",
    )
    parser.add_argument("--settings", type=Path, default=DEFAULT_SETTINGS_PATH)
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write annotated records to this JSON file instead of printing a table.",
    )
    return parser.parse_args(argv)


def run_filter(args: argparse.Namespace) -> dict[str, Any]:
    settings = load_filter_settings(args.settings)
    internships = sort_by_posted_date(load_internships(args.internships))
    profile = load_profile(args.profile)
    context = ViewingContext(
        role=args.role,
        show_all=args.show_all,
        show_expired=args.show_expired,
        search_term=args.search,
        applied_internship_ids=load_applied_ids(args.applied),
        now=args.now,
    )

    results = filter_and_annotate(internships, context, profile, settings=settings)
    active, expired = count_active_and_expired(results)
    logger.info(
        "Kept %d of %d internships (active=%d expired=%d)",
        len(results),
        len(internships),
        active,
        expired,
    )
    return {
        "total": len(internships),
        "kept": len(results),
        "active": active,
        "expired": expired,
        "results": results,
    }


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        report = run_filter(args)
    except (FileNotFoundError, ValueError):
        logger.exception("Could not filter internships.")
        return 1

    if args.output is not None:
        write_json_atomic([item.to_dict() for item in report["results"]], args.output)
        print(f"Wrote annotated internships: {args.output}")
    else:
        frame = annotations_to_frame(report["results"])
        if frame.empty:
            print("No internships found matching your criteria.")
        else:
            print(frame.drop(columns=["departments"]).to_string(index=False))
    print(
        "Counts: "
        f"total={report['total']}, "
        f"kept={report['kept']}, "
        f"active={report['active']}, "
        f"expired={report['expired']}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
