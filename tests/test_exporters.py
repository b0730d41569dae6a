"""
tests/test_exporters.py

Tests for the Excel and PDF exports of a seating plan.
Requires 'pytest' to run.
"""

import os
import io
import tempfile
import shutil
import openpyxl
import pytest
from seatplan.models import RoomLayout
from seatplan.placement import build_seating_plan
from seatplan.excel_exporter import ExcelExporter
from seatplan.pdf_exporter import PdfExporter


@pytest.fixture
def plan():
    tickets = [f"259F1A{code}{n:02d}" for code in ("01", "05", "12") for n in range(1, 11)]
    return build_seating_plan(tickets, 20, RoomLayout(4, 5))


def test_excel_sheets(plan):
    temp_dir = tempfile.mkdtemp()
    try:
        path = os.path.join(temp_dir, "plan.xlsx")
        ExcelExporter(plan, ["Hall A"]).export(path)
        wb = openpyxl.load_workbook(path)
        assert wb.sheetnames == [
            "Summary",
            "Room1_Seating", "Room1_HallWise",
            "Room2_Seating", "Room2_HallWise",
            "Branch Statistics",
        ]
        summary = wb["Summary"]
        assert summary.cell(6, 1).value == "Hall A"
        assert summary.cell(7, 1).value == "Room 2"
        assert summary.cell(6, 2).value + summary.cell(7, 2).value == 30
    finally:
        shutil.rmtree(temp_dir)


def test_excel_seat_list_and_grid(plan):
    wb = openpyxl.load_workbook(io.BytesIO(ExcelExporter(plan).to_bytes()))
    seating = wb["Room1_Seating"]
    first = plan.room_assignments(0)[0]
    assert seating.cell(4, 2).value == first.candidate.identifier
    assert seating.cell(4, 3).value == first.seat_label
    assert seating.cell(4, 4).value == first.candidate.branch

    grid = wb["Room1_HallWise"]
    top_left = plan.rooms[0].get_seat(0, 0)
    assert grid.cell(5, 1).value == "DESK 1"
    assert grid.cell(4, 2).value == "COLUMN 1"
    assert grid.cell(5, 2).value == f"{top_left.identifier}\n{top_left.branch}"


def test_excel_branch_statistics(plan):
    wb = openpyxl.load_workbook(io.BytesIO(ExcelExporter(plan).to_bytes()))
    ws = wb["Branch Statistics"]
    rows = [[cell.value for cell in row] for row in ws.iter_rows(min_row=2)]
    assert rows == [
        ["CIVIL", 10, "33.33%"],
        ["CSE", 10, "33.33%"],
        ["IT", 10, "33.33%"],
        ["Total", 30, "100.00%"],
    ]


def test_pdf_export(plan):
    data = PdfExporter(plan).to_bytes()
    assert data.startswith(b"%PDF")

    temp_dir = tempfile.mkdtemp()
    try:
        path = os.path.join(temp_dir, "plan.pdf")
        PdfExporter(plan).export(path)
        assert os.path.getsize(path) > 0
    finally:
        shutil.rmtree(temp_dir)


def test_pdf_room_header_and_attendance(plan):
    exporter = PdfExporter(plan)
    room = plan.rooms[0]
    header = exporter.room_header_lines(room)
    assert header[0] == f"Total Students: {room.student_count}"
    assert header[1] == "Room Configuration: 4 rows x 5 columns (20 seats)"
    assert exporter.attendance_lines(room)[0] == f"Allotted: {room.student_count}"
