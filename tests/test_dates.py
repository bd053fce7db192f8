from datetime import date, datetime, timedelta

from attendance_summary.utils import normalize_date_range, parse_date, round_half_up, strip_alphanumeric, weekday_label

TODAY = date(2025, 10, 15)


def test_empty_inputs_default_to_last_week():
    assert normalize_date_range(None, None, today=TODAY) == (TODAY - timedelta(days=7), TODAY)
    assert normalize_date_range("", "   ", today=TODAY) == (TODAY - timedelta(days=7), TODAY)


def test_malformed_inputs_fall_back_silently():
    start, end = normalize_date_range("not a date", "2025-13-45", today=TODAY)
    assert (start, end) == (TODAY - timedelta(days=7), TODAY)


def test_reversed_range_is_swapped():
    assert normalize_date_range("2025-10-10", "2025-10-01", today=TODAY) == (
        date(2025, 10, 1),
        date(2025, 10, 10),
    )


def test_future_end_is_clamped_to_today():
    start, end = normalize_date_range("2025-10-01", "2025-12-01", today=TODAY)
    assert start == date(2025, 10, 1)
    assert end == TODAY


def test_future_start_moves_to_yesterday():
    start, end = normalize_date_range("2025-11-01", "2025-12-01", today=TODAY)
    assert start == TODAY - timedelta(days=1)
    assert end == TODAY


def test_window_is_measured_from_clamped_end():
    start, end = normalize_date_range("2025-01-01", "2026-03-01", today=TODAY)
    assert end == TODAY
    assert start == TODAY - timedelta(days=90)


def test_ninety_day_window_keeps_end():
    start, end = normalize_date_range("2025-01-01", "2025-09-30", today=TODAY)
    assert end == date(2025, 9, 30)
    assert (end - start).days == 90


def test_ranges_older_than_a_year_are_pulled_forward():
    oldest = TODAY - timedelta(days=365)
    assert normalize_date_range("2020-01-01", "2020-02-01", today=TODAY) == (oldest, oldest)


def test_normalized_range_bounds_hold_for_mixed_inputs():
    samples = [
        None,
        "",
        "garbage",
        "2019-06-01",
        "2024-10-01",
        "2025-02-28",
        "2025-10-14",
        "2025-10-15",
        "2025-10-16",
        "2030-01-01",
        date(2025, 7, 1),
        datetime(2025, 8, 1, 9, 30),
    ]
    oldest = TODAY - timedelta(days=365)

    for start_input in samples:
        for end_input in samples:
            start, end = normalize_date_range(start_input, end_input, today=TODAY)
            assert start <= end
            assert end <= TODAY
            assert start >= oldest
            assert (end - start).days <= 90


def test_parse_date_accepts_common_formats():
    assert parse_date("2025-10-01") == date(2025, 10, 1)
    assert parse_date("2025/10/01") == date(2025, 10, 1)
    assert parse_date("01.10.2025") == date(2025, 10, 1)
    assert parse_date("2025-10-01 08:15:00") == date(2025, 10, 1)
    assert parse_date(datetime(2025, 10, 1, 23, 59)) == date(2025, 10, 1)
    assert parse_date("yesterday") is None
    assert parse_date(None) is None


def test_weekday_label():
    assert weekday_label(date(2025, 10, 15)) == "Wednesday"
    assert weekday_label(date(2025, 10, 19)) == "Sunday"


def test_strip_alphanumeric_keeps_separators():
    assert strip_alphanumeric("Day 1 - Mon") == "  - "
    assert strip_alphanumeric("A/B") == "/"
    assert strip_alphanumeric(None) == ""


def test_round_half_up():
    assert round_half_up(62.5) == 63
    assert round_half_up(2.25, 1) == 2.3
    assert round_half_up(2.24, 1) == 2.2
    assert round_half_up(0.05, 1) == 0.1
