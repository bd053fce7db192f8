from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from attendance_summary.data import Database


def test_initialize_creates_tables(tmp_path: Path) -> None:
    db_path = tmp_path / "attendance.db"
    database = Database(db_path)
    database.initialize()

    with database.connect() as connection:
        tables = {
            row[0]
            for row in connection.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            )
        }

    expected_tables = {
        "people",
        "courses",
        "course_classes",
        "course_class_people",
        "tt_days",
        "tt_day_dates",
        "tt_column_rows",
        "tt_day_row_classes",
        "attendance_log_people",
        "school_year_terms",
        "attendance_transfer_records",
        "year_groups",
        "form_groups",
        "form_group_tutors",
        "student_enrolments",
        "schema_migrations",
    }

    assert expected_tables.issubset(tables)


def test_initialize_applies_each_migration_once(tmp_path: Path) -> None:
    database = Database(tmp_path / "nested" / "attendance.db")

    assert database.initialize() == ["0001_initial.sql", "0002_form_groups.sql"]
    assert database.initialize() == []
    assert database.applied_migrations() == ["0001_initial.sql", "0002_form_groups.sql"]
    assert database.path.exists()


def test_connect_rolls_back_on_error(tmp_path: Path) -> None:
    database = Database(tmp_path / "attendance.db")
    database.initialize()

    with pytest.raises(sqlite3.IntegrityError):
        with database.connect() as connection:
            connection.execute("INSERT INTO courses(id, name_short) VALUES ('c1', 'MATH')")
            connection.execute("INSERT INTO courses(id, name_short) VALUES ('c1', 'MATH')")

    with database.connect() as connection:
        count = connection.execute("SELECT COUNT(*) FROM courses").fetchone()[0]

    assert count == 0


def test_foreign_keys_are_enforced(tmp_path: Path) -> None:
    database = Database(tmp_path / "attendance.db")
    database.initialize()

    with pytest.raises(sqlite3.IntegrityError):
        with database.connect() as connection:
            connection.execute(
                "INSERT INTO course_classes(id, course_id, name_short) VALUES ('cc1', 'missing', '1A')"
            )
