from .attendance import (
    DEFAULT_ATTENDANCE_WEIGHTS,
    NO_RECORD,
    AttendanceEvent,
    DailyScore,
    FormGroup,
    Student,
)
from .schedule import (
    CandidateSlot,
    CourseClass,
    MatchResult,
    TimetableSlot,
    TransferChoice,
    TransferRequest,
)

__all__ = [
    "DEFAULT_ATTENDANCE_WEIGHTS",
    "NO_RECORD",
    "AttendanceEvent",
    "CandidateSlot",
    "CourseClass",
    "DailyScore",
    "FormGroup",
    "MatchResult",
    "Student",
    "TimetableSlot",
    "TransferChoice",
    "TransferRequest",
]
