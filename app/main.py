from __future__ import annotations

import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import streamlit as st

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app.helpers import apply_block_message, listing_heading, listing_table, target_departments
from src.io.records import (
    load_applied_ids,
    load_filter_settings,
    load_internships,
    load_profile,
    sort_by_posted_date,
)
from src.profiles.completeness import build_profile_notification
from src.rank.eligibility import StudentProfile, describe_criteria
from src.rank.recommend import recommend_for_internship
from src.rank.settings import FilterSettings
from src.rank.visibility import (
    ROLE_ANONYMOUS,
    VIEWER_ROLES,
    ViewingContext,
    evaluate_internship,
    filter_and_annotate,
)

PROCESSED_DIR = ROOT_DIR / "data" / "processed"
INTERNSHIPS_PATH = PROCESSED_DIR / "internships.json"
PROFILE_PATH = PROCESSED_DIR / "profile.json"
APPLICATIONS_PATH = PROCESSED_DIR / "applications.json"
SETTINGS_PATH = PROCESSED_DIR / "filter_settings.json"


@st.cache_data(show_spinner=False)
def _load_internships_cached(path_text: str, modified_ns: int) -> list[dict[str, Any]]:
    return sort_by_posted_date(load_internships(Path(path_text)))


def _ensure_session_state() -> None:
    st.session_state.setdefault("internships_path", str(INTERNSHIPS_PATH))
    st.session_state.setdefault("profile_path", str(PROFILE_PATH))
    st.session_state.setdefault("applications_path", str(APPLICATIONS_PATH))


def _optional_path(text: str) -> Path | None:
    cleaned = text.strip()
    if not cleaned:
        return None
    path = Path(cleaned)
    return path if path.exists() else None


def _viewer_profile(role: str, path_text: str) -> dict[str, Any] | None:
    # Anonymous visitors never carry a profile, even when a file is configured.
    if role == ROLE_ANONYMOUS:
        return None
    return load_profile(_optional_path(path_text))


def _render_notification(profile: dict[str, Any] | None, settings: FilterSettings) -> None:
    notification = build_profile_notification(
        profile, now=datetime.now(tz=UTC), settings=settings
    )
    if notification is not None:
        st.warning(notification.message)


def _render_detail(
    internships: list[dict[str, Any]],
    internship_id: str,
    context: ViewingContext,
    profile: dict[str, Any] | None,
    settings: FilterSettings,
) -> None:
    internship = next((item for item in internships if str(item.get("id")) == internship_id), None)
    if internship is None:
        st.error("Internship not found")
        return

    annotated = evaluate_internship(internship, context, profile, settings=settings)
    st.subheader(annotated.record.title or annotated.internship_id)
    st.caption(annotated.record.company_name)
    st.write(internship.get("description") or "")

    st.markdown("**Eligibility Criteria**")
    criteria_lines = describe_criteria(annotated.record.eligibility_criteria, settings=settings)
    if criteria_lines:
        for line in criteria_lines:
            st.write(f"- {line}")
    else:
        st.write("No specific eligibility criteria mentioned.")

    st.markdown("**Target Departments**")
    targets = target_departments(annotated)
    st.write(", ".join(targets) if targets else "Open to all departments.")

    department = (profile or {}).get("department")
    block_message = apply_block_message(annotated, role=context.role, department=department)
    if block_message:
        st.info(block_message)
    else:
        st.success("You can apply to this internship.")

    st.markdown("**More For You**")
    others = recommend_for_internship(
        internships,
        annotated.internship_id,
        StudentProfile.from_record(profile),
        context,
        settings=settings,
    )
    if not others:
        st.write("No other opportunities available.")
    for other in others:
        st.write(f"- {other.get('title') or other.get('id')} ({other.get('companyName') or ''})")


def main() -> None:
    st.set_page_config(page_title="Internship Board", layout="wide")
    st.title("Internship Board")
    _ensure_session_state()

    with st.sidebar:
        st.header("Data")
        st.text_input("internships file", key="internships_path")
        st.text_input("profile file (optional)", key="profile_path")
        st.text_input("applications file (optional)", key="applications_path")

        st.divider()
        st.header("View")
        role = st.selectbox("role", options=VIEWER_ROLES, index=0)
        search_term = st.text_input("Search internships...")
        show_all = st.checkbox("Show all internships", value=False)
        show_expired = st.checkbox("Show expired", value=False, disabled=not show_all)

    internships_path = Path(st.session_state.internships_path)
    if not internships_path.exists():
        st.info(f"No internship file found at {internships_path}.")
        return

    try:
        settings = load_filter_settings(SETTINGS_PATH)
        internships = _load_internships_cached(
            str(internships_path.resolve()), internships_path.stat().st_mtime_ns
        )
        profile = _viewer_profile(role, st.session_state.profile_path)
        applied_ids = load_applied_ids(_optional_path(st.session_state.applications_path))
    except (FileNotFoundError, ValueError) as exc:
        st.error(f"Failed to load internships. Please try again later. ({exc})")
        return

    _render_notification(profile, settings)

    context = ViewingContext(
        role=role,
        show_all=show_all,
        show_expired=show_all and show_expired,
        search_term=search_term,
        applied_internship_ids=applied_ids,
    )
    results = filter_and_annotate(internships, context, profile, settings=settings)
    department = (profile or {}).get("department")

    st.header(
        listing_heading(
            results,
            show_all=context.show_all,
            show_expired=context.show_expired,
            department=department,
        )
    )
    if not results:
        st.write("No internships found matching your criteria.")
        return

    st.dataframe(listing_table(results, show_all=context.show_all), use_container_width=True)

    options = [item.internship_id for item in results]
    labels = {item.internship_id: item.record.title or item.internship_id for item in results}
    selected = st.selectbox(
        "View details",
        options=options,
        format_func=lambda internship_id: labels.get(internship_id, internship_id),
    )
    if selected:
        _render_detail(internships, selected, context, profile, settings)


if __name__ == "__main__":
    main()
