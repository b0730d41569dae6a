"""
seatplan/utils.py

Shared constants and small parsing helpers for the seating planner.
"""
import re
from typing import Dict, List, Optional

# --- Room / Settings Defaults ---
DEFAULT_STUDENTS_PER_ROOM: int = 24
DEFAULT_ROWS: int = 4
DEFAULT_COLS: int = 6

# --- Settings Limits (what the settings form accepts) ---
MAX_STUDENTS_PER_ROOM: int = 100
MAX_ROOM_DIMENSION: int = 10

# --- Placement Tuning ---
# Number of queued candidates (current one included) searched for a swap in the first pass.
LOOKAHEAD_WINDOW: int = 20

# --- Branch Lookup ---
UNKNOWN_BRANCH: str = "Unknown"
BRANCH_MARKER: str = "F1A"

BRANCH_MAP: Dict[str, str] = {
    "01": "CIVIL",
    "02": "EEE",
    "03": "MECH",
    "04": "ECE",
    "05": "CSE",
    "12": "IT",
}

# Light fills, hex without '#', as openpyxl expects them
BRANCH_COLORS: Dict[str, str] = {
    "CIVIL": "FAD7D7",
    "EEE": "D6E9FF",
    "MECH": "D7F5DC",
    "ECE": "FFF8D9",
    "CSE": "E7E0FF",
    "IT": "FFE6CC",
}
UNKNOWN_COLOR: str = "EEEEEE"

# --- Hall Ticket Patterns (spreadsheet ingestion) ---
HALL_TICKET_PATTERNS: List[str] = [
    r"\d{3}F1A\d{4}",                       # Standard format: 259F1A0501
    r"\d{2}[A-Z]\d{2}[A-Z]\d{4}",           # Lateral entry style: 21F15A0123
    r"\b\d{2}[A-Z]{1,2}\d{2}[A-Z]\d{2,4}\b",
]


def get_numeric_suffix(identifier: str) -> Optional[int]:
    """
    Returns the value of the last digit run in the identifier (its last four
    digits at most), or None when that run is shorter than two digits.
    """
    runs = re.findall(r"\d+", identifier)
    if not runs:
        return None
    last_run = runs[-1]
    if len(last_run) < 2:
        return None
    return int(last_run[-4:])


def get_branch_color(branch: str) -> str:
    return BRANCH_COLORS.get(branch, UNKNOWN_COLOR)


def default_room_names(room_count: int) -> List[str]:
    return [f"Room {index + 1}" for index in range(room_count)]


def is_positive_int(value) -> bool:
    # bool is an int subclass; a True room count is a caller bug
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
