from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Sequence

from attendance_summary.models import DEFAULT_ATTENDANCE_WEIGHTS, NO_RECORD, AttendanceEvent, DailyScore
from attendance_summary.utils.numbers import round_half_up


def attendance_score(status: str, weights: Mapping[str, float] | None = None) -> float:
    """Score one period by keyword matching against the weight table.

    Every key contained in ``status`` contributes its weight and the lowest one
    wins, so "Absent - Sick Leave" scores as absent. Unknown statuses count as
    fully present.
    """

    table = DEFAULT_ATTENDANCE_WEIGHTS if weights is None else weights
    matched = [float(weight) for keyword, weight in table.items() if keyword in status]
    if not matched:
        return 1.0
    return min(matched)


def calculate_daily_attendance(
    events_by_date: Mapping[date, Sequence[AttendanceEvent]],
    weights: Mapping[str, float] | None = None,
) -> list[DailyScore]:
    results: list[DailyScore] = []

    for day, events in events_by_date.items():
        # A day where nothing was ever taken is reported as not applicable.
        if all(event.status.strip() == NO_RECORD for event in events):
            results.append(DailyScore(date=day, expected=0.0, actual=0.0))
            continue

        expected = float(len(events))
        actual = sum(attendance_score(event.status, weights) for event in events)
        results.append(DailyScore(date=day, expected=round_half_up(expected, 1), actual=round_half_up(actual, 1)))

    return results


def group_events_by_date(events: Iterable[AttendanceEvent]) -> dict[date, list[AttendanceEvent]]:
    grouped: dict[date, list[AttendanceEvent]] = {}
    for event in events:
        grouped.setdefault(event.date, []).append(event)
    return grouped
