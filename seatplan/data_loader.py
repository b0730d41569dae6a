"""
seatplan/data_loader.py

Reads hall tickets out of uploaded spreadsheets, plus the optional
seating settings and branch code tables.
"""

import io
import os
import re
from typing import List, Dict, Optional, Union, IO
import pandas as pd
from . import utils

Source = Union[str, os.PathLike, IO[bytes]]

_TICKET_PATTERNS = [re.compile(p) for p in utils.HALL_TICKET_PATTERNS]


def find_hall_tickets(value) -> List[str]:
    """All hall tickets found in one cell value, pattern by pattern."""
    if value is None or pd.isna(value):
        return []
    text = str(value).upper()
    found = []
    for pattern in _TICKET_PATTERNS:
        for ticket in pattern.findall(text):
            # the general pattern re-matches what the specific ones found
            if ticket not in found:
                found.append(ticket)
    return found


def _read_frames(source: Source, filename: Optional[str]) -> List[pd.DataFrame]:
    name = filename or (source if isinstance(source, (str, os.PathLike)) else "")
    is_csv = str(name).lower().endswith(".csv")

    if hasattr(source, "read"):
        data = source.read()
        source = io.BytesIO(data if isinstance(data, bytes) else data.encode("utf-8"))

    if is_csv:
        return [pd.read_csv(source, header=None, dtype=str, keep_default_na=False)]
    sheets = pd.read_excel(source, sheet_name=None, header=None, dtype=str)
    return list(sheets.values())


def extract_hall_tickets(source: Source, filename: Optional[str] = None) -> List[str]:
    """
    Scans every cell of every sheet for hall ticket numbers.
    Returns the unique tickets in the order they were first seen.
    Raises ValueError when the file cannot be read.
    """
    try:
        frames = _read_frames(source, filename)
    except Exception as e:
        raise ValueError(f"Could not read spreadsheet: {e}") from e

    tickets: Dict[str, None] = {}
    for frame in frames:
        for row in frame.itertuples(index=False):
            for cell in row:
                for ticket in find_hall_tickets(cell):
                    tickets.setdefault(ticket, None)

    print(f"✓ Found {len(tickets)} unique hall tickets")
    return list(tickets)


def load_seating_config(filepath: str) -> Dict[str, int]:
    """
    Reads 'parameter,value' rows (students_per_room, rows, cols).
    Missing file or bad values fall back to the defaults.
    """
    config = {
        "students_per_room": utils.DEFAULT_STUDENTS_PER_ROOM,
        "rows": utils.DEFAULT_ROWS,
        "cols": utils.DEFAULT_COLS,
    }
    try:
        df = pd.read_csv(filepath, dtype=str)
        df.columns = df.columns.str.strip()

        for _, row in df.iterrows():
            param = str(row["parameter"]).strip()
            if param not in config:
                print(f"⚠ Warning: Unknown seating parameter '{param}' ignored")
                continue
            try:
                config[param] = int(str(row["value"]).strip())
            except ValueError:
                print(f"⚠ Warning: Invalid value '{row['value']}' for {param}, using {config[param]}")

    except FileNotFoundError:
        print(f"⚠ Warning: {filepath} not found, using default seating settings")
    except Exception as e:
        print(f"⚠ Error loading seating config: {e}")

    return config


def load_branch_map(filepath: str) -> Dict[str, str]:
    """
    Reads 'code,branch' rows. Codes are zero-padded to two digits.
    Missing file falls back to the built-in table.
    """
    branch_map: Dict[str, str] = {}
    try:
        df = pd.read_csv(filepath, dtype=str)
        df.columns = df.columns.str.strip()

        for _, row in df.iterrows():
            code = str(row["code"]).strip().zfill(2)
            branch = str(row["branch"]).strip().upper()
            if not code.isdigit() or len(code) != 2 or not branch:
                print(f"⚠ Warning: Skipping invalid branch row: {dict(row)}")
                continue
            branch_map[code] = branch

    except FileNotFoundError:
        print(f"⚠ Warning: {filepath} not found, using built-in branch codes")
    except Exception as e:
        print(f"⚠ Error loading branch codes: {e}")

    if not branch_map:
        return dict(utils.BRANCH_MAP)
    return branch_map
