from __future__ import annotations

from datetime import date
from tkinter import filedialog
from typing import Any

import customtkinter as ctk

from attendance_summary.models import Student
from attendance_summary.services import AttendanceSummaryError, AttendanceSummaryService, DailySummary
from attendance_summary.services.export import (
    build_export_filename_stub,
    export_summary_csv,
    export_summary_excel,
)
from attendance_summary.services.summary_report import SummaryRow
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
    VS_TEXT_ON_BAND,
)

NO_STUDENT_LABEL = "Select a student"
TABLE_HEADERS = ("Date", "Day", "Standard Attendance", "Daily Attendance", "Attendance Rate", "")
DETAIL_HEADERS = ("Course", "Period", "Start Time", "Status")


class AttendanceSummaryView(ctk.CTkFrame):
    """Daily attendance table for one student over a bounded date range."""

    def __init__(self, master, summary_service: AttendanceSummaryService) -> None:
        super().__init__(master, fg_color=VS_BG)
        self._service = summary_service

        self._search_var = ctk.StringVar(value="")
        self._student_var = ctk.StringVar(value=NO_STUDENT_LABEL)
        self._start_var = ctk.StringVar(value="")
        self._end_var = ctk.StringVar(value="")
        self._status_var = ctk.StringVar(value="Choose a student to view attendance information.")
        self._totals_var = ctk.StringVar(value="")

        self._students_by_label: dict[str, Student] = {}
        self._summary: DailySummary | None = None
        self._detail_frames: dict[date, ctk.CTkFrame] = {}

        self._header_font = ctk.CTkFont(size=15, weight="bold")
        self._body_font = ctk.CTkFont(size=14)

        self._build_layout()
        self.refresh()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def refresh(self) -> None:
        self._load_students()
        if self._summary is not None:
            self._load_summary()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def _build_layout(self) -> None:
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(1, weight=1)

        filters = ctk.CTkFrame(self, fg_color=VS_SURFACE, corner_radius=14, border_width=1, border_color=VS_DIVIDER)
        filters.grid(row=0, column=0, sticky="nsw", padx=(24, 12), pady=24)
        filters.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            filters,
            text="View attendance information",
            font=ctk.CTkFont(size=20, weight="bold"),
            text_color=VS_TEXT,
        ).grid(row=0, column=0, sticky="w", padx=18, pady=(16, 4))

        ctk.CTkLabel(
            filters,
            text="Ranges are limited to 90 days within the last year.",
            font=ctk.CTkFont(size=13),
            text_color=VS_TEXT_MUTED,
        ).grid(row=1, column=0, sticky="w", padx=18, pady=(0, 12))

        search_entry = ctk.CTkEntry(
            filters,
            textvariable=self._search_var,
            placeholder_text="Search students",
            fg_color=VS_BG,
            border_color=VS_BORDER,
            text_color=VS_TEXT,
        )
        search_entry.grid(row=2, column=0, sticky="ew", padx=18, pady=6)
        search_entry.bind("<Return>", lambda _event: self._load_students())

        self._student_menu = ctk.CTkOptionMenu(
            filters,
            variable=self._student_var,
            values=[NO_STUDENT_LABEL],
            fg_color=VS_SURFACE_ALT,
            button_color=VS_ACCENT,
            button_hover_color=VS_ACCENT_HOVER,
            dropdown_fg_color=VS_SURFACE,
            dropdown_hover_color=VS_ACCENT,
        )
        self._student_menu.grid(row=3, column=0, sticky="ew", padx=18, pady=6)

        row_index = 4
        for label, variable in (("Start Date", self._start_var), ("End Date", self._end_var)):
            ctk.CTkLabel(filters, text=label, text_color=VS_TEXT).grid(
                row=row_index, column=0, sticky="w", padx=18, pady=(8, 0)
            )
            ctk.CTkEntry(
                filters,
                textvariable=variable,
                placeholder_text="YYYY-MM-DD",
                fg_color=VS_BG,
                border_color=VS_BORDER,
                text_color=VS_TEXT,
            ).grid(row=row_index + 1, column=0, sticky="ew", padx=18, pady=(2, 6))
            row_index += 2

        ctk.CTkButton(
            filters,
            text="Update Date",
            command=self._load_summary,
            fg_color=VS_ACCENT,
            hover_color=VS_ACCENT_HOVER,
            text_color=VS_TEXT,
            font=ctk.CTkFont(size=15, weight="bold"),
            height=40,
        ).grid(row=row_index, column=0, sticky="ew", padx=18, pady=(12, 6))

        export_row = ctk.CTkFrame(filters, fg_color="transparent")
        export_row.grid(row=row_index + 1, column=0, sticky="ew", padx=18, pady=(6, 12))
        export_row.grid_columnconfigure((0, 1), weight=1)
        self._csv_button = ctk.CTkButton(
            export_row,
            text="Export CSV",
            command=self._export_csv,
            fg_color=VS_SURFACE_ALT,
            hover_color=VS_DIVIDER,
            state="disabled",
        )
        self._csv_button.grid(row=0, column=0, sticky="ew", padx=(0, 4))
        self._excel_button = ctk.CTkButton(
            export_row,
            text="Export Excel",
            command=self._export_excel,
            fg_color=VS_SURFACE_ALT,
            hover_color=VS_DIVIDER,
            state="disabled",
        )
        self._excel_button.grid(row=0, column=1, sticky="ew", padx=(4, 0))

        self._status_label = ctk.CTkLabel(
            filters,
            textvariable=self._status_var,
            text_color=VS_TEXT_MUTED,
            wraplength=260,
            justify="left",
        )
        self._status_label.grid(row=row_index + 2, column=0, sticky="w", padx=18, pady=(0, 16))

        table_card = ctk.CTkFrame(self, fg_color=VS_SURFACE, corner_radius=14, border_width=1, border_color=VS_DIVIDER)
        table_card.grid(row=0, column=1, sticky="nsew", padx=(12, 24), pady=24)
        table_card.grid_rowconfigure(1, weight=1)
        table_card.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            table_card,
            textvariable=self._totals_var,
            font=self._header_font,
            text_color=VS_TEXT,
        ).grid(row=0, column=0, sticky="w", padx=18, pady=(16, 8))

        self._table = ctk.CTkScrollableFrame(table_card, fg_color=VS_SURFACE_ALT, corner_radius=10)
        self._table.grid(row=1, column=0, sticky="nsew", padx=12, pady=(0, 12))
        for column in range(len(TABLE_HEADERS)):
            self._table.grid_columnconfigure(column, weight=1)

    # ------------------------------------------------------------------
    # Data loading
    # ------------------------------------------------------------------
    def _load_students(self) -> None:
        students = self._service.list_students(self._search_var.get())
        self._students_by_label = {
            f"{student.display_name} ({student.person_id})": student for student in students
        }
        values = [NO_STUDENT_LABEL, *self._students_by_label.keys()]
        self._student_menu.configure(values=values)
        if self._student_var.get() not in values:
            self._student_var.set(NO_STUDENT_LABEL)

    def _load_summary(self) -> None:
        student = self._students_by_label.get(self._student_var.get())
        person_id = student.person_id if student else None

        try:
            summary = self._service.daily_summary(person_id, self._start_var.get(), self._end_var.get())
        except AttendanceSummaryError as exc:
            self._set_status(str(exc), tone="warning")
            return

        self._summary = summary
        self._start_var.set(summary.start.isoformat())
        self._end_var.set(summary.end.isoformat())
        self._render_rows(summary.rows)

        totals = summary.totals
        if totals["days"]:
            self._totals_var.set(
                f"{totals['days']} day(s) · {totals['actual']:.1f} / {totals['expected']:.1f} · {totals['rate']}%"
            )
        else:
            self._totals_var.set("No attendance taken in this range.")

        self._csv_button.configure(state="normal" if summary.rows else "disabled")
        self._excel_button.configure(state="normal" if summary.rows else "disabled")
        self._set_status(f"Showing {len(summary.rows)} day(s).", tone="success")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def _render_rows(self, rows: list[SummaryRow]) -> None:
        for child in self._table.winfo_children():
            child.destroy()
        self._detail_frames.clear()

        for column, header in enumerate(TABLE_HEADERS):
            ctk.CTkLabel(self._table, text=header, font=self._header_font, text_color=VS_TEXT).grid(
                row=0, column=column, sticky="ew", padx=4, pady=(4, 8)
            )

        if not rows:
            ctk.CTkLabel(self._table, text="There are no records to display.", text_color=VS_TEXT_MUTED).grid(
                row=1, column=0, columnspan=len(TABLE_HEADERS), pady=12
            )
            return

        grid_row = 1
        for row in rows:
            values: list[str] = [row.date.isoformat(), row.weekday]
            if row.is_no_record:
                values.extend([row.rate_text, "", ""])
            else:
                values.extend([row.expected, row.actual, row.rate_text])

            for column, value in enumerate(values):
                ctk.CTkLabel(
                    self._table,
                    text=value,
                    font=self._body_font,
                    fg_color=row.color,
                    text_color=VS_TEXT_ON_BAND,
                    corner_radius=0,
                ).grid(row=grid_row, column=column, sticky="nsew", padx=0, pady=1)

            ctk.CTkButton(
                self._table,
                text="View Details",
                width=110,
                command=lambda day=row.date: self._toggle_details(day),
                fg_color=VS_ACCENT,
                hover_color=VS_ACCENT_HOVER,
            ).grid(row=grid_row, column=len(values), padx=4, pady=1)

            detail_frame = self._build_detail_frame(row)
            detail_frame.grid(row=grid_row + 1, column=0, columnspan=len(TABLE_HEADERS), sticky="ew", padx=8, pady=4)
            detail_frame.grid_remove()
            self._detail_frames[row.date] = detail_frame
            grid_row += 2

    def _build_detail_frame(self, row: SummaryRow) -> ctk.CTkFrame:
        frame = ctk.CTkFrame(self._table, fg_color=VS_SURFACE, corner_radius=8)
        for column in range(len(DETAIL_HEADERS)):
            frame.grid_columnconfigure(column, weight=1)

        if not row.details:
            ctk.CTkLabel(frame, text="No detailed records.", text_color=VS_TEXT_MUTED).grid(row=0, column=0, pady=6)
            return frame

        for column, header in enumerate(DETAIL_HEADERS):
            ctk.CTkLabel(frame, text=header, font=self._header_font, text_color=VS_TEXT).grid(
                row=0, column=column, padx=4, pady=4
            )
        for index, detail in enumerate(row.details, start=1):
            for column, value in enumerate((detail.course_name, detail.period_name, detail.time_start, detail.status)):
                ctk.CTkLabel(frame, text=value, font=self._body_font, text_color=VS_TEXT).grid(
                    row=index, column=column, padx=4, pady=2
                )
        return frame

    def _toggle_details(self, day: date) -> None:
        frame = self._detail_frames.get(day)
        if frame is None:
            return
        if frame.winfo_ismapped():
            frame.grid_remove()
        else:
            frame.grid()

    # ------------------------------------------------------------------
    # Export helpers
    # ------------------------------------------------------------------
    def _export_stub(self) -> str:
        summary = self._summary
        if summary is None:
            return "attendance_summary"
        student = self._students_by_label.get(self._student_var.get())
        label = student.display_name if student else summary.person_id
        return build_export_filename_stub(label, summary.start, summary.end)

    def _export_csv(self) -> None:
        self._export(export_summary_csv, extension=".csv", filetypes=[("CSV files", "*.csv"), ("All files", "*.*")])

    def _export_excel(self) -> None:
        self._export(
            export_summary_excel,
            extension=".xlsx",
            filetypes=[("Excel Workbook", "*.xlsx"), ("All files", "*.*")],
        )

    def _export(self, writer: Any, *, extension: str, filetypes: list[tuple[str, str]]) -> None:
        if self._summary is None:
            self._set_status("Load a summary before exporting.", tone="warning")
            return

        file_name = filedialog.asksaveasfilename(
            title="Export attendance summary",
            defaultextension=extension,
            filetypes=filetypes,
            initialfile=f"{self._export_stub()}{extension}",
        )
        if not file_name:
            return

        try:
            writer(file_name, self._summary.rows)
        except OSError as exc:
            self._set_status(f"Failed to export: {exc}", tone="warning")
            return

        self._set_status(f"Exported {len(self._summary.rows)} rows.", tone="success")

    def _set_status(self, message: str, tone: str = "info") -> None:
        self._status_var.set(message)
        self._status_label.configure(text_color=STATUS_TONES.get(tone, VS_TEXT_MUTED))
