from .attendance_scorer import attendance_score, calculate_daily_attendance, group_events_by_date
from .errors import AttendanceSummaryError, NotFoundError, ValidationError
from .summary_service import AttendanceSummaryService, DailySummary
from .transfer_matcher import (
    find_slot,
    match_transfer_slots,
    parse_replacement_choices,
    parse_transfer_request,
    resolve_choices,
)

__all__ = [
	"AttendanceSummaryError",
	"AttendanceSummaryService",
	"DailySummary",
	"NotFoundError",
	"ValidationError",
	"attendance_score",
	"calculate_daily_attendance",
	"find_slot",
	"group_events_by_date",
	"match_transfer_slots",
	"parse_replacement_choices",
	"parse_transfer_request",
	"resolve_choices",
]
