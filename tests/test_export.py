import csv
from datetime import date
from pathlib import Path

from openpyxl import load_workbook

from attendance_summary.models import DailyScore
from attendance_summary.services.export import (
    EXPORT_HEADERS,
    build_export_filename_stub,
    export_summary_csv,
    export_summary_excel,
)
from attendance_summary.services.summary_report import build_summary_rows


def summary_rows():
    scores = [
        DailyScore(date=date(2025, 10, 6), expected=2.0, actual=0.5),
        DailyScore(date=date(2025, 10, 7), expected=0.0, actual=0.0),
    ]
    return build_summary_rows(scores, {})


def test_export_summary_csv(tmp_path: Path) -> None:
    target = export_summary_csv(tmp_path / "exports" / "summary.csv", summary_rows())

    with target.open(newline="", encoding="utf-8") as handle:
        rows = list(csv.reader(handle))

    assert rows[0] == list(EXPORT_HEADERS)
    assert rows[1] == ["2025-10-06", "Monday", "2.0", "0.5", "25%"]
    assert rows[2] == ["2025-10-07", "Tuesday", "", "", "No Record"]


def test_export_summary_excel_fills_rate_bands(tmp_path: Path) -> None:
    target = export_summary_excel(tmp_path / "summary.xlsx", summary_rows())

    sheet = load_workbook(target).active

    assert sheet.title == "Attendance"
    assert [cell.value for cell in sheet[1]] == list(EXPORT_HEADERS)
    assert [cell.value for cell in sheet[2]] == ["2025-10-06", "Monday", "2.0", "0.5", "25%"]
    assert sheet["A2"].fill.fgColor.rgb.endswith("FFCCCC")
    assert sheet["E3"].value == "No Record"
    assert sheet["A3"].fill.fgColor.rgb.endswith("E0E0E0")


def test_build_export_filename_stub_removes_path_characters():
    stub = build_export_filename_stub("Doe, Jane (0042/7)", date(2025, 10, 1), date(2025, 10, 15))
    assert stub == "Attendance Doe, Jane (0042_7) 2025-10-01 to 2025-10-15"
