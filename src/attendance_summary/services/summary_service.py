from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Sequence

from attendance_summary.data import Database
from attendance_summary.models import (
    AttendanceEvent,
    CourseClass,
    DailyScore,
    FormGroup,
    MatchResult,
    Student,
    TimetableSlot,
    TransferChoice,
    TransferRequest,
)
from attendance_summary.services.attendance_scorer import calculate_daily_attendance, group_events_by_date
from attendance_summary.services.errors import NotFoundError, ValidationError
from attendance_summary.services.summary_report import SummaryRow, build_summary_rows, summarize_totals
from attendance_summary.services.transfer_matcher import (
    match_transfer_slots,
    parse_transfer_request,
    resolve_choices,
)
from attendance_summary.utils.dates import normalize_date_range, parse_date

log = logging.getLogger(__name__)

STUDENT_ROLE = "student"
ALL_FORM_GROUPS = "*"

_SLOT_COLUMNS = """
                tdc.id AS slot_id,
                tdc.course_class_id,
                c.name_short || '-' || cc.name_short AS course_name,
                tday.name AS day_name,
                tcolrow.id AS column_row_id,
                tcolrow.name AS period_name,
                tcolrow.time_start,
                tcolrow.time_end
"""

_SLOT_JOINS = """
          FROM tt_day_row_classes AS tdc
          JOIN course_classes AS cc ON cc.id = tdc.course_class_id
          JOIN courses AS c ON c.id = cc.course_id
          JOIN tt_days AS tday ON tday.id = tdc.tt_day_id
          JOIN tt_column_rows AS tcolrow ON tcolrow.id = tdc.tt_column_row_id
"""


@dataclass(slots=True)
class DailySummary:
    person_id: str
    start: date
    end: date
    scores: list[DailyScore]
    rows: list[SummaryRow]
    totals: dict[str, Any]
    events_by_date: dict[date, list[AttendanceEvent]] = field(default_factory=dict)


class AttendanceSummaryService:
    def __init__(self, database: Database, *, weights: Mapping[str, float] | None = None) -> None:
        self._database = database
        self._weights = dict(weights) if weights is not None else None

    def initialize(self) -> None:
        self._database.initialize()

    def use_database(self, database: Database) -> None:
        self._database = database
        self._database.initialize()

    def set_weights(self, weights: Mapping[str, float] | None) -> None:
        self._weights = dict(weights) if weights is not None else None

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def list_students(self, search: str | None = None, form_group_id: str | None = None) -> list[Student]:
        """Students sorted by form group then name; ``"*"`` or ``None`` means every form group."""

        query_parts = [
            "SELECT p.id, p.surname, p.preferred_name, yg.name AS year_group, fg.name AS form_group",
            "  FROM people AS p",
            "  LEFT JOIN student_enrolments AS se ON se.person_id = p.id",
            "  LEFT JOIN form_groups AS fg ON fg.id = se.form_group_id",
            "  LEFT JOIN year_groups AS yg ON yg.id = se.year_group_id",
            " WHERE p.role = ?",
        ]
        params: list[str] = [STUDENT_ROLE]

        if form_group_id and form_group_id != ALL_FORM_GROUPS:
            query_parts.append("   AND se.form_group_id = ?")
            params.append(form_group_id)

        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query_parts.append("   AND (p.surname LIKE ? OR p.preferred_name LIKE ? OR p.id LIKE ?)")
            params.extend([pattern, pattern, pattern])

        query_parts.append(" ORDER BY fg.name, p.surname, p.preferred_name, p.id")

        with self._database.connect() as connection:
            rows = connection.execute("\n".join(query_parts), tuple(params)).fetchall()

        return [
            Student(
                person_id=str(row["id"]),
                surname=row["surname"],
                preferred_name=row["preferred_name"],
                year_group=row["year_group"],
                form_group=row["form_group"],
            )
            for row in rows
        ]

    def list_form_groups(self) -> list[FormGroup]:
        with self._database.connect() as connection:
            groups = connection.execute("SELECT id, name FROM form_groups ORDER BY name, id").fetchall()
            tutor_rows = connection.execute(
                """
                SELECT t.form_group_id, p.surname, p.preferred_name
                  FROM form_group_tutors AS t
                  JOIN people AS p ON p.id = t.person_id
              ORDER BY p.surname, p.preferred_name
                """
            ).fetchall()

        tutors: dict[str, list[str]] = {}
        for row in tutor_rows:
            name = ", ".join(part for part in (row["surname"], row["preferred_name"]) if part)
            tutors.setdefault(str(row["form_group_id"]), []).append(name)

        return [
            FormGroup(
                form_group_id=str(row["id"]),
                name=row["name"],
                tutors=tuple(tutors.get(str(row["id"]), ())),
            )
            for row in groups
        ]

    def list_student_courses(self, person_id: str) -> list[CourseClass]:
        with self._database.connect() as connection:
            rows = connection.execute(
                """
                SELECT cc.id,
                       c.name_short || '.' || cc.name_short AS name
                  FROM course_class_people AS p
                  JOIN course_classes AS cc ON cc.id = p.course_class_id
                  JOIN courses AS c ON c.id = cc.course_id
                 WHERE p.person_id = ?
              ORDER BY name
                """,
                (person_id,),
            ).fetchall()

        return [CourseClass(course_class_id=str(row["id"]), name=row["name"]) for row in rows]

    def get_course_class(self, course_class_id: str) -> CourseClass:
        with self._database.connect() as connection:
            row = connection.execute(
                """
                SELECT cc.id,
                       c.name_short || '.' || cc.name_short AS name
                  FROM course_classes AS cc
                  JOIN courses AS c ON c.id = cc.course_id
                 WHERE cc.id = ?
                """,
                (course_class_id,),
            ).fetchone()

        if not row:
            raise NotFoundError("The submitted data does not exist")

        return CourseClass(course_class_id=str(row["id"]), name=row["name"])

    def term_first_day(self, today: date | None = None) -> date:
        """First day of the term containing ``today``, or ``today`` outside any term."""

        today = today or date.today()
        with self._database.connect() as connection:
            row = connection.execute(
                """
                SELECT first_day
                  FROM school_year_terms
                 WHERE ? BETWEEN first_day AND last_day
              ORDER BY first_day ASC
                 LIMIT 1
                """,
                (today.isoformat(),),
            ).fetchone()

        if not row:
            return today
        return parse_date(row["first_day"]) or today

    # ------------------------------------------------------------------
    # Attendance summary
    # ------------------------------------------------------------------
    def record_attendance(
        self,
        *,
        person_id: str,
        course_class_id: str,
        slot_id: str,
        on_date: date,
        status: str,
        taken_at: datetime | None = None,
    ) -> int:
        timestamp = (taken_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
        with self._database.connect() as connection:
            cursor = connection.execute(
                """
                INSERT INTO attendance_log_people (
                    tt_day_row_class_id, course_class_id, person_id, date, type, timestamp_taken
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (slot_id, course_class_id, person_id, on_date.isoformat(), status.strip(), timestamp),
            )
            return int(cursor.lastrowid)

    def fetch_attendance_events(self, person_id: str, start: date, end: date) -> dict[date, list[AttendanceEvent]]:
        """Scheduled periods in the range, each with its most recently taken status."""

        with self._database.connect() as connection:
            rows = connection.execute(
                """
                WITH schedule AS (
                    SELECT cc.id AS course_class_id,
                           p.person_id,
                           td.date AS course_date,
                           trc.id AS slot_id,
                           colrow.name AS period_name,
                           colrow.time_start,
                           c.name_short || '-' || cc.name_short AS course_name
                      FROM course_class_people AS p
                      JOIN course_classes AS cc ON cc.id = p.course_class_id
                      JOIN courses AS c ON c.id = cc.course_id
                      JOIN tt_day_row_classes AS trc ON trc.course_class_id = cc.id
                      JOIN tt_day_dates AS td ON td.tt_day_id = trc.tt_day_id
                      JOIN tt_column_rows AS colrow ON colrow.id = trc.tt_column_row_id
                      JOIN people AS per ON per.id = p.person_id
                     WHERE p.person_id = :person_id
                       AND per.role = :role
                       AND td.date BETWEEN :start_date AND :end_date
                ),
                latest_attendance AS (
                    SELECT tt_day_row_class_id,
                           course_class_id,
                           person_id,
                           date,
                           type,
                           timestamp_taken,
                           ROW_NUMBER() OVER (
                               PARTITION BY tt_day_row_class_id, course_class_id, person_id, date
                               ORDER BY timestamp_taken DESC, id DESC
                           ) AS rn
                      FROM attendance_log_people
                     WHERE person_id = :person_id
                       AND date BETWEEN :start_date AND :end_date
                )
                SELECT s.course_name,
                       s.course_class_id,
                       s.person_id,
                       s.period_name,
                       s.time_start,
                       s.course_date,
                       COALESCE(a.type, 'No Record') AS attendance_type,
                       a.timestamp_taken AS latest_timestamp
                  FROM schedule AS s
             LEFT JOIN latest_attendance AS a
                    ON a.tt_day_row_class_id = s.slot_id
                   AND a.course_class_id = s.course_class_id
                   AND a.person_id = s.person_id
                   AND a.date = s.course_date
                   AND a.rn = 1
              ORDER BY s.course_date, s.time_start, s.course_class_id, s.person_id
                """,
                {
                    "person_id": person_id,
                    "role": STUDENT_ROLE,
                    "start_date": start.isoformat(),
                    "end_date": end.isoformat(),
                },
            ).fetchall()

        return group_events_by_date(AttendanceEvent.from_row(row) for row in rows)

    def daily_summary(
        self,
        person_id: str | None,
        start_input: date | str | None = None,
        end_input: date | str | None = None,
        *,
        today: date | None = None,
    ) -> DailySummary:
        if not person_id or not str(person_id).strip():
            raise ValidationError("Please select the corresponding student!")

        person_id = str(person_id).strip()
        start, end = normalize_date_range(start_input, end_input, today=today)
        events_by_date = self.fetch_attendance_events(person_id, start, end)
        scores = calculate_daily_attendance(events_by_date, self._weights)

        log.info(
            "Attendance summary for %s between %s and %s: %d day(s)",
            person_id,
            start.isoformat(),
            end.isoformat(),
            len(scores),
        )

        return DailySummary(
            person_id=person_id,
            start=start,
            end=end,
            scores=scores,
            rows=build_summary_rows(scores, events_by_date),
            totals=summarize_totals(scores),
            events_by_date=events_by_date,
        )

    # ------------------------------------------------------------------
    # Schedule transfer
    # ------------------------------------------------------------------
    def list_course_slots(self, course_class_id: str) -> list[TimetableSlot]:
        with self._database.connect() as connection:
            rows = connection.execute(
                "SELECT" + _SLOT_COLUMNS + _SLOT_JOINS
                + """
                 WHERE tdc.course_class_id = ?
              ORDER BY tday.name, tcolrow.time_start, tdc.id
                """,
                (course_class_id,),
            ).fetchall()

        return [TimetableSlot.from_row(row) for row in rows]

    def list_overlapping_slots(self, course_class_id: str) -> list[TimetableSlot]:
        """Every slot sharing a day and timetable column/row with the course class."""

        with self._database.connect() as connection:
            rows = connection.execute(
                "SELECT DISTINCT" + _SLOT_COLUMNS + _SLOT_JOINS
                + """
                  JOIN (
                        SELECT DISTINCT tt_day_id, tt_column_row_id
                          FROM tt_day_row_classes
                         WHERE course_class_id = ?
                  ) AS base
                    ON base.tt_day_id = tdc.tt_day_id
                   AND base.tt_column_row_id = tdc.tt_column_row_id
              ORDER BY tday.name, tcolrow.time_start, tdc.id
                """,
                (course_class_id,),
            ).fetchall()

        return [TimetableSlot.from_row(row) for row in rows]

    def propose_transfer(self, form: Mapping[str, Any]) -> list[MatchResult]:
        request = self.parse_and_check_request(form)
        old_rows = self.list_course_slots(request.course_class_id)
        new_rows = self.list_overlapping_slots(request.course_class_id)
        results = match_transfer_slots(request, old_rows, new_rows)

        log.info(
            "Transfer proposal for %s from %s: %d of %d slot(s) matched",
            request.person_id,
            request.course_class_id,
            len(results),
            len(request.slot_ids),
        )
        return results

    def parse_and_check_request(self, form: Mapping[str, Any]) -> TransferRequest:
        request = parse_transfer_request(form)
        self.get_course_class(request.course_class_id)
        return request

    def transfer_attendance_records(
        self,
        *,
        submitter_id: str,
        results: Sequence[MatchResult],
        choices: Iterable[TransferChoice],
        start_date: date | str | None,
        end_date: date | str | None,
    ) -> list[dict[str, Any]]:
        """Move attendance logs to the chosen replacement slots and record each move."""

        start = parse_date(start_date)
        end = parse_date(end_date)
        if start is None or end is None:
            raise ValidationError("Please provide a valid start and end date.")
        if start > end:
            raise ValidationError("The start date must not be later than the end date.")

        resolved = resolve_choices(results, choices)
        if not resolved:
            raise ValidationError("Please select at least one replacement course.")

        outcomes: list[dict[str, Any]] = []
        with self._database.connect() as connection:
            for result, candidate in resolved:
                cursor = connection.execute(
                    """
                    UPDATE attendance_log_people
                       SET course_class_id = ?,
                           tt_day_row_class_id = ?
                     WHERE person_id = ?
                       AND course_class_id = ?
                       AND tt_day_row_class_id = ?
                       AND date BETWEEN ? AND ?
                    """,
                    (
                        candidate.course_class_id,
                        candidate.slot_id,
                        result.person_id,
                        result.course_class_id,
                        result.slot_id,
                        start.isoformat(),
                        end.isoformat(),
                    ),
                )
                affected = max(int(cursor.rowcount), 0)

                connection.execute(
                    """
                    INSERT INTO attendance_transfer_records (
                        submitter_id, person_id, old_course_class_id, old_slot_id,
                        new_course_class_id, new_slot_id, affected_count
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        submitter_id,
                        result.person_id,
                        result.course_class_id,
                        result.slot_id,
                        candidate.course_class_id,
                        candidate.slot_id,
                        affected,
                    ),
                )

                outcomes.append(
                    {
                        "person_id": result.person_id,
                        "old_course_class_id": result.course_class_id,
                        "old_slot_id": result.slot_id,
                        "new_course_class_id": candidate.course_class_id,
                        "new_slot_id": candidate.slot_id,
                        "affected_count": affected,
                    }
                )
                log.info(
                    "Transferred %d attendance record(s) for %s from %s to %s",
                    affected,
                    result.person_id,
                    result.heading,
                    candidate.option_label,
                )

        return outcomes

    def list_transfer_records(self, person_id: str | None = None, limit: int = 20) -> list[dict]:
        query_parts = [
            "SELECT id, submitter_id, person_id, created_at,",
            "       old_course_class_id, old_slot_id, new_course_class_id, new_slot_id, affected_count",
            "  FROM attendance_transfer_records",
        ]
        params: list[Any] = []
        if person_id is not None:
            query_parts.append(" WHERE person_id = ?")
            params.append(person_id)
        query_parts.append(" ORDER BY id DESC")
        query_parts.append(" LIMIT ?")
        params.append(limit)

        with self._database.connect() as connection:
            rows = connection.execute("\n".join(query_parts), tuple(params)).fetchall()

        return [dict(row) for row in rows]
