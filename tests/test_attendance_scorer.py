from datetime import date

from attendance_summary.models import DEFAULT_ATTENDANCE_WEIGHTS, NO_RECORD, AttendanceEvent
from attendance_summary.services import attendance_score, calculate_daily_attendance, group_events_by_date


def make_event(day: date, status: str, period: str = "P1", course: str = "MATH-1A") -> AttendanceEvent:
    return AttendanceEvent(
        course_class_id="cc-1",
        course_name=course,
        period_name=period,
        time_start="08:30:00",
        date=day,
        status=status,
    )


def test_present_and_sick_absence_scores_one_of_two():
    day = date(2025, 10, 6)
    events = {day: [make_event(day, "Present"), make_event(day, "Absent - Sick Leave", period="P2")]}

    [score] = calculate_daily_attendance(events)

    assert score.date == day
    assert score.to_dict() == {"date": "2025-10-06", "Expected": "2.0", "Actual": "1.0"}


def test_day_with_only_unrecorded_periods_is_not_applicable():
    day = date(2025, 10, 7)
    events = {day: [make_event(day, NO_RECORD), make_event(day, " No Record ", period="P2")]}

    [score] = calculate_daily_attendance(events)

    assert score.expected == 0.0
    assert score.actual == 0.0
    assert score.is_no_record


def test_unrecorded_period_counts_as_present_on_a_recorded_day():
    day = date(2025, 10, 8)
    events = {day: [make_event(day, "Late"), make_event(day, NO_RECORD, period="P2")]}

    [score] = calculate_daily_attendance(events)

    assert score.expected_text == "2.0"
    assert score.actual_text == "1.7"


def test_lowest_matching_weight_wins():
    assert attendance_score("Absent - Sick Leave") == 0.0
    assert attendance_score("Present - Late") == 0.7
    assert attendance_score("Sick Leave") == 0.5
    assert attendance_score("Official Leave") == 1.0


def test_unknown_status_scores_as_present():
    assert attendance_score("Field Trip") == 1.0
    assert attendance_score("") == 1.0


def test_status_matching_is_case_sensitive():
    assert attendance_score("absent") == 1.0


def test_custom_weights_replace_the_default_table():
    weights = {"Late": 0.3, "Absent": 0.0}
    day = date(2025, 10, 9)
    events = {day: [make_event(day, "Late"), make_event(day, "Sick Leave", period="P2")]}

    [score] = calculate_daily_attendance(events, weights)

    assert score.actual == 1.3
    assert attendance_score("Sick Leave", weights) == 1.0


def test_scores_follow_input_date_order():
    later = date(2025, 10, 10)
    earlier = date(2025, 10, 1)
    events = {later: [make_event(later, "Present")], earlier: [make_event(earlier, "Absent")]}

    scores = calculate_daily_attendance(events)

    assert [score.date for score in scores] == [later, earlier]
    assert [score.actual for score in scores] == [1.0, 0.0]


def test_scoring_is_repeatable():
    day = date(2025, 10, 6)
    events = {day: [make_event(day, "Present"), make_event(day, "Suspended", period="P2")]}

    assert calculate_daily_attendance(events) == calculate_daily_attendance(events)
    assert DEFAULT_ATTENDANCE_WEIGHTS["Suspended"] == 0.0


def test_group_events_by_date_keeps_first_seen_order():
    first = date(2025, 10, 2)
    second = date(2025, 10, 3)
    events = [make_event(first, "Present"), make_event(second, "Late"), make_event(first, "Absent", period="P2")]

    grouped = group_events_by_date(events)

    assert list(grouped) == [first, second]
    assert [event.period_name for event in grouped[first]] == ["P1", "P2"]


def test_half_tenths_round_away_from_zero():
    weights = {"Late": 0.75, "Present": 1.0, "Sick Leave": 0.5}
    day = date(2025, 10, 14)
    events = {
        day: [
            make_event(day, "Late"),
            make_event(day, "Present", period="P2"),
            make_event(day, "Sick Leave", period="P3"),
        ]
    }

    [score] = calculate_daily_attendance(events, weights)

    assert score.actual_text == "2.3"
    assert score.expected_text == "3.0"


def test_date_without_events_scores_zero():
    day = date(2025, 10, 15)

    [score] = calculate_daily_attendance({day: []})

    assert score.expected == 0.0
    assert score.actual == 0.0
    assert score.is_no_record
