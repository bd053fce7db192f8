from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional

from attendance_summary.utils.dates import coerce_datetime, parse_date

NO_RECORD = "No Record"

DEFAULT_ATTENDANCE_WEIGHTS: dict[str, float] = {
    "Absent": 0.0,
    "Personal Leave": 0.0,
    "Suspended": 0.0,
    "Late": 0.7,
    "Early Leave": 0.7,
    "Sick Leave": 0.5,
    "Official Leave": 1.0,
    "Present": 1.0,
    NO_RECORD: 1.0,
}


@dataclass(slots=True, frozen=True)
class Student:
    person_id: str
    surname: Optional[str] = None
    preferred_name: Optional[str] = None
    year_group: Optional[str] = None
    form_group: Optional[str] = None

    @property
    def display_name(self) -> str:
        parts = [self.surname or "", self.preferred_name or ""]
        name = ", ".join(part for part in parts if part).strip()
        return name if name else self.person_id


@dataclass(slots=True, frozen=True)
class FormGroup:
    form_group_id: str
    name: str
    tutors: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class AttendanceEvent:
    course_class_id: str
    course_name: str
    period_name: str
    time_start: str
    date: date
    status: str = NO_RECORD
    recorded_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AttendanceEvent":
        event_date = parse_date(row["course_date"])
        if event_date is None:
            raise ValueError(f"Unsupported course date: {row['course_date']!r}")

        recorded_raw = row["latest_timestamp"] if "latest_timestamp" in row.keys() else None
        recorded_at = coerce_datetime(recorded_raw) if recorded_raw else None

        return cls(
            course_class_id=str(row["course_class_id"]),
            course_name=row["course_name"],
            period_name=row["period_name"],
            time_start=str(row["time_start"] or ""),
            date=event_date,
            status=row["attendance_type"] or NO_RECORD,
            recorded_at=recorded_at,
        )


@dataclass(slots=True, frozen=True)
class DailyScore:
    """Expected and actual attendance for a single calendar day."""

    date: date
    expected: float
    actual: float

    @property
    def expected_text(self) -> str:
        return f"{self.expected:.1f}"

    @property
    def actual_text(self) -> str:
        return f"{self.actual:.1f}"

    @property
    def is_no_record(self) -> bool:
        return self.expected == 0 and self.actual == 0

    def to_dict(self) -> dict[str, str]:
        return {
            "date": self.date.isoformat(),
            "Expected": self.expected_text,
            "Actual": self.actual_text,
        }
