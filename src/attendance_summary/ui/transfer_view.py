from __future__ import annotations

from datetime import date

import customtkinter as ctk

from attendance_summary.models import CourseClass, FormGroup, MatchResult, Student, TimetableSlot
from attendance_summary.services import (
    AttendanceSummaryError,
    AttendanceSummaryService,
    parse_replacement_choices,
)
from attendance_summary.ui.theme import (
    STATUS_TONES,
    VS_ACCENT,
    VS_ACCENT_HOVER,
    VS_BG,
    VS_BORDER,
    VS_DIVIDER,
    VS_SURFACE,
    VS_SURFACE_ALT,
    VS_TEXT,
    VS_TEXT_MUTED,
)

ALL_FORM_GROUPS_LABEL = "All form groups"
NO_STUDENT_LABEL = "Select a student"
NO_COURSE_LABEL = "Select a course"
NO_REPLACEMENT_LABEL = "Keep current course"
SLOT_HEADERS = ("Course Name", "Cycle Name", "Period Name", "Start Time", "End Time", "Transfer?")


class TransferRecordsView(ctk.CTkFrame):
    """Move a student's attendance records to a same-timeslot replacement course."""

    def __init__(self, master, summary_service: AttendanceSummaryService, *, submitter_id: str) -> None:
        super().__init__(master, fg_color=VS_BG)
        self._service = summary_service
        self._submitter_id = submitter_id

        self._form_group_var = ctk.StringVar(value=ALL_FORM_GROUPS_LABEL)
        self._student_var = ctk.StringVar(value=NO_STUDENT_LABEL)
        self._course_var = ctk.StringVar(value=NO_COURSE_LABEL)
        self._start_var = ctk.StringVar(value="")
        self._end_var = ctk.StringVar(value="")
        self._status_var = ctk.StringVar(value="Choose a student and a course to view its scheduling.")

        self._form_groups_by_label: dict[str, FormGroup] = {}
        self._students_by_label: dict[str, Student] = {}
        self._courses_by_label: dict[str, CourseClass] = {}
        self._slot_vars: dict[str, ctk.BooleanVar] = {}
        self._results: list[MatchResult] = []
        self._replacement_vars: dict[str, ctk.StringVar] = {}
        self._replacement_values: dict[str, dict[str, str]] = {}

        self._header_font = ctk.CTkFont(size=15, weight="bold")

        self._build_layout()
        self.refresh()

    def refresh(self) -> None:
        form_groups = self._service.list_form_groups()
        self._form_groups_by_label = {group.name: group for group in form_groups}
        group_values = [ALL_FORM_GROUPS_LABEL, *self._form_groups_by_label.keys()]
        self._form_group_menu.configure(values=group_values)
        if self._form_group_var.get() not in group_values:
            self._form_group_var.set(ALL_FORM_GROUPS_LABEL)
        self._load_students()

        today = date.today()
        if not self._start_var.get():
            self._start_var.set(self._service.term_first_day(today).isoformat())
        if not self._end_var.get():
            self._end_var.set(today.isoformat())

    def _load_students(self) -> None:
        form_group = self._form_groups_by_label.get(self._form_group_var.get())
        students = self._service.list_students(form_group_id=form_group.form_group_id if form_group else None)
        self._students_by_label = {f"{student.display_name} ({student.person_id})": student for student in students}
        values = [NO_STUDENT_LABEL, *self._students_by_label.keys()]
        self._student_menu.configure(values=values)
        if self._student_var.get() not in values:
            self._student_var.set(NO_STUDENT_LABEL)
            self._course_var.set(NO_COURSE_LABEL)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def _build_layout(self) -> None:
        self.grid_rowconfigure(1, weight=1)
        self.grid_columnconfigure(0, weight=1)

        controls = ctk.CTkFrame(self, fg_color=VS_SURFACE, corner_radius=14, border_width=1, border_color=VS_DIVIDER)
        controls.grid(row=0, column=0, sticky="ew", padx=24, pady=(24, 12))
        controls.grid_columnconfigure((1, 3), weight=1)

        ctk.CTkLabel(
            controls,
            text="Transfer attendance records",
            font=ctk.CTkFont(size=20, weight="bold"),
            text_color=VS_TEXT,
        ).grid(row=0, column=0, columnspan=4, sticky="w", padx=18, pady=(16, 8))

        ctk.CTkLabel(controls, text="Form Group", text_color=VS_TEXT).grid(row=1, column=0, sticky="w", padx=(18, 8))
        self._form_group_menu = self._option_menu(
            controls, self._form_group_var, [ALL_FORM_GROUPS_LABEL], self._on_form_group_selected
        )
        self._form_group_menu.grid(row=1, column=1, sticky="ew", pady=6)

        ctk.CTkLabel(controls, text="Student", text_color=VS_TEXT).grid(row=2, column=0, sticky="w", padx=(18, 8))
        self._student_menu = self._option_menu(controls, self._student_var, [NO_STUDENT_LABEL], self._on_student_selected)
        self._student_menu.grid(row=2, column=1, sticky="ew", pady=6)

        ctk.CTkLabel(controls, text="Course Name", text_color=VS_TEXT).grid(row=2, column=2, sticky="w", padx=(18, 8))
        self._course_menu = self._option_menu(controls, self._course_var, [NO_COURSE_LABEL], None)
        self._course_menu.grid(row=2, column=3, sticky="ew", padx=(0, 18), pady=6)

        for column, (label, variable) in enumerate((("Start Date", self._start_var), ("End Date", self._end_var))):
            ctk.CTkLabel(controls, text=label, text_color=VS_TEXT).grid(
                row=3, column=column * 2, sticky="w", padx=(18, 8)
            )
            ctk.CTkEntry(
                controls,
                textvariable=variable,
                placeholder_text="YYYY-MM-DD",
                fg_color=VS_BG,
                border_color=VS_BORDER,
                text_color=VS_TEXT,
            ).grid(row=3, column=column * 2 + 1, sticky="ew", padx=(0, 18 if column else 0), pady=6)

        buttons = ctk.CTkFrame(controls, fg_color="transparent")
        buttons.grid(row=4, column=0, columnspan=4, sticky="ew", padx=18, pady=(8, 8))
        buttons.grid_columnconfigure((0, 1, 2), weight=1)
        for column, (text, command) in enumerate(
            (
                ("View Scheduling", self._load_slots),
                ("Select New Course Information", self._propose),
                ("Confirm Transfer", self._confirm),
            )
        ):
            ctk.CTkButton(
                buttons,
                text=text,
                command=command,
                fg_color=VS_ACCENT,
                hover_color=VS_ACCENT_HOVER,
                text_color=VS_TEXT,
                height=38,
            ).grid(row=0, column=column, sticky="ew", padx=4)

        self._status_label = ctk.CTkLabel(
            controls,
            textvariable=self._status_var,
            text_color=VS_TEXT_MUTED,
            wraplength=900,
            justify="left",
        )
        self._status_label.grid(row=5, column=0, columnspan=4, sticky="w", padx=18, pady=(0, 14))

        self._content = ctk.CTkScrollableFrame(self, fg_color=VS_SURFACE_ALT, corner_radius=14)
        self._content.grid(row=1, column=0, sticky="nsew", padx=24, pady=(0, 24))
        for column in range(len(SLOT_HEADERS)):
            self._content.grid_columnconfigure(column, weight=1)

    def _option_menu(self, parent, variable: ctk.StringVar, values: list[str], command) -> ctk.CTkOptionMenu:
        return ctk.CTkOptionMenu(
            parent,
            variable=variable,
            values=values,
            command=command,
            fg_color=VS_SURFACE_ALT,
            button_color=VS_ACCENT,
            button_hover_color=VS_ACCENT_HOVER,
            dropdown_fg_color=VS_SURFACE,
            dropdown_hover_color=VS_ACCENT,
        )

    def _clear_content(self) -> None:
        for child in self._content.winfo_children():
            child.destroy()

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------
    def _on_form_group_selected(self, _label: str) -> None:
        self._load_students()
        self._on_student_selected(self._student_var.get())
        form_group = self._form_groups_by_label.get(self._form_group_var.get())
        if form_group and form_group.tutors:
            self._set_status(f"Tutors: {'; '.join(form_group.tutors)}")

    def _on_student_selected(self, _label: str) -> None:
        student = self._students_by_label.get(self._student_var.get())
        courses = self._service.list_student_courses(student.person_id) if student else []
        self._courses_by_label = {course.name: course for course in courses}
        self._course_menu.configure(values=[NO_COURSE_LABEL, *self._courses_by_label.keys()])
        self._course_var.set(NO_COURSE_LABEL)
        self._slot_vars.clear()
        self._results = []
        self._clear_content()

    def _selection_form(self) -> dict[str, str]:
        form: dict[str, str] = {}
        student = self._students_by_label.get(self._student_var.get())
        course = self._courses_by_label.get(self._course_var.get())
        if student:
            form["gibbonPersonID"] = student.person_id
        if course:
            form["gibbonCourseClassID"] = course.course_class_id
        return form

    def _load_slots(self) -> None:
        form = self._selection_form()
        if "gibbonPersonID" not in form:
            self._set_status("Please select the corresponding student!", tone="warning")
            return
        if "gibbonCourseClassID" not in form:
            self._set_status("Please select the corresponding course!", tone="warning")
            return

        slots = self._service.list_course_slots(form["gibbonCourseClassID"])
        self._results = []
        self._render_slots(slots)
        self._set_status(
            f"{len(slots)} scheduled slot(s). Tick the ones to transfer." if slots else "There are no records to display.",
            tone="info" if slots else "warning",
        )

    def _render_slots(self, slots: list[TimetableSlot]) -> None:
        self._clear_content()
        self._slot_vars.clear()

        for column, header in enumerate(SLOT_HEADERS):
            ctk.CTkLabel(self._content, text=header, font=self._header_font, text_color=VS_TEXT).grid(
                row=0, column=column, padx=4, pady=(4, 8)
            )

        for index, slot in enumerate(slots, start=1):
            for column, value in enumerate(
                (slot.course_name, slot.day_name, slot.period_name, slot.time_start or "", slot.time_end or "")
            ):
                ctk.CTkLabel(self._content, text=value, text_color=VS_TEXT).grid(row=index, column=column, padx=4, pady=2)
            variable = ctk.BooleanVar(value=False)
            ctk.CTkCheckBox(self._content, text="", variable=variable).grid(row=index, column=len(SLOT_HEADERS) - 1)
            self._slot_vars[slot.slot_id] = variable

    def _propose(self) -> None:
        form = self._selection_form()
        for slot_id, variable in self._slot_vars.items():
            if variable.get():
                form[f"transfer-{slot_id}"] = "on"

        try:
            self._results = self._service.propose_transfer(form)
        except AttendanceSummaryError as exc:
            self._set_status(str(exc), tone="warning")
            return

        self._render_results()
        self._set_status(
            f"Choose a replacement for {len(self._results)} slot(s), then confirm the transfer.",
            tone="info",
        )

    def _render_results(self) -> None:
        self._clear_content()
        self._replacement_vars.clear()
        self._replacement_values.clear()

        grid_row = 0
        for result in self._results:
            ctk.CTkLabel(self._content, text=result.heading, font=self._header_font, text_color=VS_TEXT).grid(
                row=grid_row, column=0, columnspan=len(SLOT_HEADERS), sticky="w", padx=8, pady=(12, 4)
            )
            ctk.CTkLabel(
                self._content,
                text=f"{result.course_name} - {result.period_name}",
                text_color=VS_TEXT,
            ).grid(row=grid_row + 1, column=0, columnspan=3, sticky="w", padx=8)

            if result.has_candidates:
                options = {candidate.option_label: candidate.option_value for candidate in result.candidates}
                variable = ctk.StringVar(value=NO_REPLACEMENT_LABEL)
                self._option_menu(self._content, variable, [NO_REPLACEMENT_LABEL, *options.keys()], None).grid(
                    row=grid_row + 1, column=3, columnspan=3, sticky="ew", padx=8
                )
                self._replacement_vars[result.slot_id] = variable
                self._replacement_values[result.slot_id] = options
            else:
                ctk.CTkLabel(
                    self._content,
                    text="No replacement courses available",
                    text_color=VS_TEXT_MUTED,
                    font=ctk.CTkFont(slant="italic"),
                ).grid(row=grid_row + 1, column=3, columnspan=3, sticky="w", padx=8)
            grid_row += 2

    def _confirm(self) -> None:
        if not self._results:
            self._set_status("Please select the corresponding course(s)!", tone="warning")
            return

        replacement_form = {
            f"replacement[{slot_id}]": self._replacement_values[slot_id].get(variable.get(), "")
            for slot_id, variable in self._replacement_vars.items()
        }

        try:
            choices = parse_replacement_choices(replacement_form)
            outcomes = self._service.transfer_attendance_records(
                submitter_id=self._submitter_id,
                results=self._results,
                choices=choices,
                start_date=self._start_var.get(),
                end_date=self._end_var.get(),
            )
        except AttendanceSummaryError as exc:
            self._set_status(str(exc), tone="warning")
            return

        moved = sum(outcome["affected_count"] for outcome in outcomes)
        self._set_status(f"Transferred {moved} attendance record(s) across {len(outcomes)} slot(s).", tone="success")
        self._results = []
        self._clear_content()

    def _set_status(self, message: str, tone: str = "info") -> None:
        self._status_var.set(message)
        self._status_label.configure(text_color=STATUS_TONES.get(tone, VS_TEXT_MUTED))
