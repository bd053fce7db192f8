from datetime import date

import pytest

from attendance_summary.models import AttendanceEvent, DailyScore
from attendance_summary.services.summary_report import (
    FULL_ATTENDANCE_COLOR,
    NO_RECORD_COLOR,
    attendance_rate,
    band_color,
    build_summary_rows,
    summarize_totals,
)


@pytest.mark.parametrize(
    "rate, color",
    [
        (0, "#FFCCCC"),
        (39, "#FFCCCC"),
        (40, "#FFE6CC"),
        (59, "#FFE6CC"),
        (60, "#FFFFCC"),
        (79, "#FFFFCC"),
        (80, "#FFFFF0"),
        (98, "#FFFFF0"),
        (99, FULL_ATTENDANCE_COLOR),
        (100, FULL_ATTENDANCE_COLOR),
    ],
)
def test_band_color_thresholds(rate, color):
    assert band_color(rate) == color


def test_attendance_rate_handles_zero_expected():
    assert attendance_rate(0, 0) == 0
    assert attendance_rate(4, 3) == 75
    assert attendance_rate(3, 2) == 67


def test_attendance_rate_rounds_halves_up():
    assert attendance_rate(8, 5.0) == 63
    assert attendance_rate(8, 0.5) == 6
    assert attendance_rate(2, 1.25) == 63


def test_build_summary_rows_colours_and_details():
    monday = date(2025, 10, 6)
    tuesday = date(2025, 10, 7)
    events = {
        monday: [
            AttendanceEvent("cc-1", "MATH-1A", "P1", "08:30:00", monday, "Present"),
            AttendanceEvent("cc-2", "PHYS-1A", "P2", "10:00:00", monday, "Absent"),
        ],
        tuesday: [AttendanceEvent("cc-1", "MATH-1A", "P1", "08:30:00", tuesday)],
    }
    scores = [
        DailyScore(date=monday, expected=2.0, actual=1.0),
        DailyScore(date=tuesday, expected=0.0, actual=0.0),
    ]

    first, second = build_summary_rows(scores, events)

    assert first.weekday == "Monday"
    assert (first.expected, first.actual, first.rate) == ("2.0", "1.0", 50)
    assert first.color == "#FFE6CC"
    assert first.rate_text == "50%"
    assert [detail.status for detail in first.details] == ["Present", "Absent"]

    assert second.is_no_record
    assert second.color == NO_RECORD_COLOR
    assert second.rate_text == "No Record"
    assert second.details[0].status == "No Record"


def test_summarize_totals_ignores_days_without_expected_periods():
    scores = [
        DailyScore(date=date(2025, 10, 6), expected=2.0, actual=1.0),
        DailyScore(date=date(2025, 10, 7), expected=0.0, actual=0.0),
        DailyScore(date=date(2025, 10, 8), expected=3.0, actual=2.7),
    ]

    assert summarize_totals(scores) == {"days": 2, "expected": 5.0, "actual": 3.7, "rate": 74}


def test_summarize_totals_empty():
    assert summarize_totals([]) == {"days": 0, "expected": 0, "actual": 0, "rate": 0}
