from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Mapping, Sequence

from attendance_summary.models import AttendanceEvent, DailyScore
from attendance_summary.utils.dates import weekday_label
from attendance_summary.utils.numbers import round_half_up

NO_RECORD_COLOR = "#E0E0E0"
NO_RECORD_LABEL = "No Record"

# (upper bound, colour) pairs, checked in order.
RATE_BANDS: tuple[tuple[int, str], ...] = (
    (40, "#FFCCCC"),
    (60, "#FFE6CC"),
    (80, "#FFFFCC"),
    (99, "#FFFFF0"),
)
FULL_ATTENDANCE_COLOR = "#FFFFFF"


def attendance_rate(expected: float, actual: float) -> int:
    if expected <= 0:
        return 0
    return int(round_half_up(actual / expected * 100))


def band_color(rate: float) -> str:
    for upper_bound, color in RATE_BANDS:
        if rate < upper_bound:
            return color
    return FULL_ATTENDANCE_COLOR


@dataclass(slots=True, frozen=True)
class PeriodDetail:
    course_name: str
    period_name: str
    time_start: str
    status: str


@dataclass(slots=True, frozen=True)
class SummaryRow:
    date: date
    weekday: str
    expected: str
    actual: str
    rate: int
    color: str
    is_no_record: bool
    details: tuple[PeriodDetail, ...] = field(default_factory=tuple)

    @property
    def rate_text(self) -> str:
        return NO_RECORD_LABEL if self.is_no_record else f"{self.rate}%"


def build_summary_rows(
    scores: Iterable[DailyScore],
    events_by_date: Mapping[date, Sequence[AttendanceEvent]],
) -> list[SummaryRow]:
    rows: list[SummaryRow] = []
    for score in scores:
        rate = attendance_rate(score.expected, score.actual)
        details = tuple(
            PeriodDetail(
                course_name=event.course_name,
                period_name=event.period_name,
                time_start=event.time_start,
                status=event.status,
            )
            for event in events_by_date.get(score.date, ())
        )
        rows.append(
            SummaryRow(
                date=score.date,
                weekday=weekday_label(score.date),
                expected=score.expected_text,
                actual=score.actual_text,
                rate=rate,
                color=NO_RECORD_COLOR if score.is_no_record else band_color(rate),
                is_no_record=score.is_no_record,
                details=details,
            )
        )
    return rows


def summarize_totals(scores: Iterable[DailyScore]) -> dict[str, float | int]:
    """Totals over the days that had something to count."""

    counted = [score for score in scores if score.expected > 0]
    expected = round_half_up(sum(score.expected for score in counted), 1)
    actual = round_half_up(sum(score.actual for score in counted), 1)
    return {
        "days": len(counted),
        "expected": expected,
        "actual": actual,
        "rate": attendance_rate(expected, actual),
    }
