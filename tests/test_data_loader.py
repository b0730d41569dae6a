"""
tests/test_data_loader.py

Unit tests for hall ticket extraction and settings files.
Requires 'pytest' to run.
"""

import os
import io
import csv
import tempfile
import shutil
import openpyxl
import pytest
from seatplan.data_loader import (
    extract_hall_tickets, find_hall_tickets, load_seating_config, load_branch_map,
)
from seatplan import utils


def create_test_csv(filename, headers, rows):
    """Helper function to create test CSV files."""
    with open(filename, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        if headers:
            writer.writerow(headers)
        writer.writerows(rows)


@pytest.fixture
def temp_dir():
    path = tempfile.mkdtemp()
    yield path
    shutil.rmtree(path)


def test_find_hall_tickets_in_cell():
    assert find_hall_tickets("259F1A0501") == ["259F1A0501"]
    assert find_hall_tickets("roll: 259f1a0502, 259F1A0503") == ["259F1A0502", "259F1A0503"]
    assert find_hall_tickets("21F15A0123") == ["21F15A0123"]
    assert find_hall_tickets("Name") == []
    assert find_hall_tickets(None) == []


def test_extract_from_csv(temp_dir):
    path = os.path.join(temp_dir, 'tickets.csv')
    create_test_csv(path, ['S.No', 'Hall Ticket', 'Name'], [
        ['1', '259F1A0502', 'Asha'],
        ['2', '259F1A0101', 'Ravi'],
        ['3', '259F1A0502', 'Asha (repeat)'],
        ['4', '', 'Absent'],
    ])
    assert extract_hall_tickets(path) == ['259F1A0502', '259F1A0101']


def test_extract_from_excel_all_sheets(temp_dir):
    path = os.path.join(temp_dir, 'tickets.xlsx')
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "CSE"
    ws.append(["Hall Ticket", "Name"])
    ws.append(["259F1A0501", "A"])
    ws.append(["259F1A0502", "B"])
    ws2 = wb.create_sheet("ECE")
    ws2.append(["Remarks", "259F1A0401 present"])
    ws2.append([None, "259F1A0501"])
    wb.save(path)

    assert extract_hall_tickets(path) == ['259F1A0501', '259F1A0502', '259F1A0401']


def test_extract_from_upload_buffer():
    data = "ticket\n259F1A0501\n259F1A1201\n".encode("utf-8")
    assert extract_hall_tickets(io.BytesIO(data), filename="upload.csv") == ['259F1A0501', '259F1A1201']


def test_unreadable_file_raises():
    with pytest.raises(ValueError):
        extract_hall_tickets(io.BytesIO(b"this is not a workbook"), filename="broken.xlsx")


def test_load_seating_config(temp_dir):
    path = os.path.join(temp_dir, 'seating_config.csv')
    create_test_csv(path, ['parameter', 'value'], [
        ['students_per_room', '30'],
        [' rows ', '5'],
        ['cols', 'six'],
        ['colour', 'blue'],
    ])
    config = load_seating_config(path)
    assert config == {"students_per_room": 30, "rows": 5, "cols": utils.DEFAULT_COLS}


def test_missing_seating_config_uses_defaults(temp_dir):
    config = load_seating_config(os.path.join(temp_dir, 'missing.csv'))
    assert config == {
        "students_per_room": utils.DEFAULT_STUDENTS_PER_ROOM,
        "rows": utils.DEFAULT_ROWS,
        "cols": utils.DEFAULT_COLS,
    }


def test_load_branch_map(temp_dir):
    path = os.path.join(temp_dir, 'branch_codes.csv')
    create_test_csv(path, ['code', 'branch'], [
        ['5', 'cse'],
        ['42', 'AI&DS'],
        ['xx', 'BAD'],
    ])
    assert load_branch_map(path) == {"05": "CSE", "42": "AI&DS"}


def test_missing_branch_map_uses_builtin(temp_dir):
    assert load_branch_map(os.path.join(temp_dir, 'missing.csv')) == utils.BRANCH_MAP
