from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from attendance_summary.utils.dates import strip_alphanumeric


@dataclass(slots=True, frozen=True)
class CourseClass:
    course_class_id: str
    name: str


@dataclass(slots=True, frozen=True)
class TimetableSlot:
    course_class_id: str
    slot_id: str
    course_name: str
    period_name: str
    day_name: str
    column_row_id: str
    time_start: Optional[str] = None
    time_end: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TimetableSlot":
        keys = set(row.keys())
        return cls(
            course_class_id=str(row["course_class_id"]),
            slot_id=str(row["slot_id"]),
            course_name=row["course_name"],
            period_name=row["period_name"],
            day_name=row["day_name"],
            column_row_id=str(row["column_row_id"]),
            time_start=str(row["time_start"]) if "time_start" in keys and row["time_start"] else None,
            time_end=str(row["time_end"]) if "time_end" in keys and row["time_end"] else None,
        )


@dataclass(slots=True, frozen=True)
class CandidateSlot:
    course_class_id: str
    course_name: str
    slot_id: str
    period_name: str

    @property
    def option_value(self) -> str:
        return f"{self.course_class_id}.{self.slot_id}"

    @property
    def option_label(self) -> str:
        return f"{self.course_name} - {self.period_name}"


@dataclass(slots=True, frozen=True)
class MatchResult:
    person_id: str
    course_class_id: str
    course_name: str
    slot_id: str
    period_name: str
    day_name: str
    column_row_id: str
    candidates: tuple[CandidateSlot, ...] = ()

    @property
    def display_day(self) -> str:
        return strip_alphanumeric(self.day_name)

    @property
    def heading(self) -> str:
        return f"{self.course_name} ({self.display_day} / {self.period_name})"

    @property
    def has_candidates(self) -> bool:
        return bool(self.candidates)

    def find_candidate(self, course_class_id: str, slot_id: str) -> CandidateSlot | None:
        for candidate in self.candidates:
            if candidate.course_class_id == course_class_id and candidate.slot_id == slot_id:
                return candidate
        return None


@dataclass(slots=True, frozen=True)
class TransferRequest:
    person_id: str
    course_class_id: str
    slot_ids: tuple[str, ...] = field(default_factory=tuple)


@dataclass(slots=True, frozen=True)
class TransferChoice:
    old_slot_id: str
    new_course_class_id: str
    new_slot_id: str
