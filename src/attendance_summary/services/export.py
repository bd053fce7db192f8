from __future__ import annotations

import csv
import logging
import re
from datetime import date
from pathlib import Path
from typing import Any, Sequence

from openpyxl import Workbook
from openpyxl.styles import PatternFill

from attendance_summary.services.summary_report import SummaryRow

log = logging.getLogger(__name__)

EXPORT_HEADERS: tuple[str, ...] = (
    "Date",
    "Day",
    "Standard Attendance",
    "Daily Attendance",
    "Attendance Rate",
)


def prepare_export_dataset(rows: Sequence[SummaryRow]) -> tuple[list[str], list[list[Any]]]:
    dataset: list[list[Any]] = []
    for row in rows:
        if row.is_no_record:
            dataset.append([row.date.isoformat(), row.weekday, "", "", row.rate_text])
        else:
            dataset.append([row.date.isoformat(), row.weekday, row.expected, row.actual, row.rate_text])
    return list(EXPORT_HEADERS), dataset


def build_export_filename_stub(student_label: str, start: date, end: date) -> str:
    raw_name = f"Attendance {student_label} {start.isoformat()} to {end.isoformat()}"
    sanitized = re.sub(r'[<>:"/\\|?*]', "_", raw_name)
    sanitized = re.sub(r"\s+", " ", sanitized).strip()
    sanitized = sanitized.strip("._ ")
    return sanitized or "attendance_summary"


def export_summary_csv(path: Path | str, rows: Sequence[SummaryRow]) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    headers, dataset = prepare_export_dataset(rows)
    with target.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(headers)
        writer.writerows(dataset)

    log.info("Exported %d summary row(s) to %s", len(dataset), target)
    return target


def export_summary_excel(path: Path | str, rows: Sequence[SummaryRow]) -> Path:
    """Write the summary to a workbook, filling each day with its rate band colour."""

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    sheet = wb.active
    sheet.title = "Attendance"

    headers, dataset = prepare_export_dataset(rows)
    sheet.append(headers)
    for row, values in zip(rows, dataset):
        sheet.append(values)
        fill = PatternFill(start_color=row.color.lstrip("#"), end_color=row.color.lstrip("#"), fill_type="solid")
        for cell in sheet[sheet.max_row]:
            cell.fill = fill

    wb.save(target)
    log.info("Exported %d summary row(s) to %s", len(dataset), target)
    return target
