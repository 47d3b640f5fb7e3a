from __future__ import annotations

import json
from pathlib import Path

import pytest

from scripts.check_profile import main as check_profile_main
from scripts.filter_internships import main as filter_main
from scripts.filter_internships import parse_args, run_filter


def _write_inputs(tmp_path: Path) -> dict[str, Path]:
    internships = [
        {
            "id": "a",
            "title": "Frontend Intern",
            "companyName": "Acme",
            "departments": ["Computer Science"],
            "domains": ["Web Development"],
            "firstRoundDate": "2026-04-01T10:00:00Z",
            "postedDate": "2026-02-01",
        },
        {
            "id": "b",
            "title": "Site Engineer Intern",
            "companyName": "BuildCo",
            "departments": ["Civil Engineering"],
            "firstRoundDate": "2026-01-01T10:00:00Z",
            "postedDate": "2026-02-10",
        },
        {
            "id": "c",
            "title": "Cloud Intern",
            "companyName": "Nimbus",
            "departments": ["Computer Science"],
            "postedDate": "2026-02-20",
        },
    ]
    paths = {
        "internships": tmp_path / "internships.json",
        "profile": tmp_path / "profile.json",
        "applied": tmp_path / "applications.json",
        "settings": tmp_path / "filter_settings.json",
    }
    paths["internships"].write_text(json.dumps(internships), encoding="utf-8")
    paths["profile"].write_text(
        json.dumps({"role": "student", "department": "Computer Science", "cgpa": 8.1}),
        encoding="utf-8",
    )
    paths["applied"].write_text(json.dumps([{"internshipId": "c"}]), encoding="utf-8")
    return paths


def _base_argv(paths: dict[str, Path]) -> list[str]:
    return [
        "--internships",
        str(paths["internships"]),
        "--profile",
        str(paths["profile"]),
        "--applied",
        str(paths["applied"]),
        "--settings",
        str(paths["settings"]),
        "--now",
        "2026-03-01T00:00:00Z",
    ]


def test_run_filter_counts_department_view(tmp_path: Path) -> None:
    paths = _write_inputs(tmp_path)

    report = run_filter(parse_args(_base_argv(paths)))

    assert report["total"] == 3
    assert report["kept"] == 1
    assert [item.internship_id for item in report["results"]] == ["a"]


def test_main_writes_annotated_json_newest_first(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    paths = _write_inputs(tmp_path)
    output_path = tmp_path / "out" / "annotated.json"

    exit_code = filter_main(
        _base_argv(paths) + ["--show-all", "--show-expired", "--output", str(output_path)]
    )

    assert exit_code == 0
    written = json.loads(output_path.read_text(encoding="utf-8"))
    assert [item["id"] for item in written] == ["c", "b", "a"]
    assert written[0]["hasApplied"] is True
    assert written[1]["reasons"] == ["DEPARTMENT_MISMATCH", "DEADLINE_PASSED"]
    assert written[2]["canApply"] is True
    assert "Counts: total=3, kept=3, active=2, expired=1" in capsys.readouterr().out


def test_main_prints_table_when_no_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    paths = _write_inputs(tmp_path)

    exit_code = filter_main(_base_argv(paths) + ["--search", "nothing-matches"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "No internships found matching your criteria." in out
    assert "Counts: total=3, kept=0, active=0, expired=0" in out


def test_main_returns_error_code_for_missing_input(tmp_path: Path) -> None:
    assert filter_main(["--internships", str(tmp_path / "missing.json")]) == 1


def test_check_profile_reports_missing_fields(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    paths = _write_inputs(tmp_path)

    exit_code = check_profile_main(["--profile", str(paths["profile"]), "--settings", str(paths["settings"])])

    out = capsys.readouterr().out
    assert exit_code == 2
    assert "Missing fields (14):" in out
    assert "- First Name" in out
    assert "You have 14 fields to complete." in out


def test_check_profile_faculty_role_override(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    profile_path = tmp_path / "faculty.json"
    profile_path.write_text(
        json.dumps(
            {
                "firstName": "Ravi",
                "lastName": "Menon",
                "department": "Civil Engineering",
                "designation": "Professor",
                "specialization": "Structural Engineering",
                "experience": 20,
                "qualifications": "PhD",
                "contactEmail": "ravi@example.edu",
            }
        ),
        encoding="utf-8",
    )

    assert check_profile_main(["--profile", str(profile_path), "--role", "faculty"]) == 0
    assert "Profile complete." in capsys.readouterr().out


def test_scripts_exit_with_error_code_for_invalid_settings(tmp_path: Path) -> None:
    paths = _write_inputs(tmp_path)
    paths["settings"].write_text(json.dumps({"cgpa_percentage_factor": None}), encoding="utf-8")

    assert filter_main(_base_argv(paths)) == 1
    assert check_profile_main(["--profile", str(paths["profile"]), "--settings", str(paths["settings"])]) == 1
