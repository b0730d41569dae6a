"""
seatplan/models.py

Data models for candidates, room layouts and the generated seating plan.
A SeatingPlan is built fresh by the placement engine on every run and is
never mutated afterwards.
"""

from typing import List, Optional, Tuple, Dict, Any
from dataclasses import dataclass, field
from . import utils


@dataclass(frozen=True)
class Candidate:
    """
    One exam candidate. The branch is assigned once by the classifier.
    """
    identifier: str
    branch: str

    def to_dict(self) -> Dict[str, str]:
        return {"identifier": self.identifier, "branch": self.branch}


@dataclass(frozen=True)
class RoomLayout:
    """
    The shape shared by every room of a plan.
    """
    rows: int = utils.DEFAULT_ROWS
    cols: int = utils.DEFAULT_COLS

    @property
    def capacity(self) -> int:
        return self.rows * self.cols


@dataclass(frozen=True)
class SeatAssignment:
    """
    A seated candidate together with its 0-indexed seat coordinates.
    """
    candidate: Candidate
    room: int
    row: int
    col: int

    @property
    def seat_label(self) -> str:
        return f"DESK - {self.row + 1} COLUMN - {self.col + 1}"


Grid = Tuple[Tuple[Optional[Candidate], ...], ...]


@dataclass(frozen=True)
class Room:
    """
    A rows x cols grid of seats; an empty seat is None.
    Rooms have no identity beyond their index in the plan.
    """
    index: int
    grid: Grid

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    def get_seat(self, row: int, col: int) -> Optional[Candidate]:
        return self.grid[row][col]

    def occupied_seats(self) -> List[Tuple[int, int, Candidate]]:
        """Seated candidates as (row, col, candidate), in row-major order."""
        return [
            (r, c, candidate)
            for r, row in enumerate(self.grid)
            for c, candidate in enumerate(row)
            if candidate is not None
        ]

    @property
    def student_count(self) -> int:
        return len(self.occupied_seats())

    def branches(self) -> List[str]:
        """Distinct branches in the room, in order of first appearance."""
        seen: List[str] = []
        for _, _, candidate in self.occupied_seats():
            if candidate.branch not in seen:
                seen.append(candidate.branch)
        return seen

    def to_rows(self) -> List[List[Optional[Dict[str, str]]]]:
        return [[c.to_dict() if c else None for c in row] for row in self.grid]


@dataclass(frozen=True)
class SeatingPlan:
    """
    Ordered rooms plus the seat of every placed candidate.
    """
    rooms: Tuple[Room, ...]
    layout: RoomLayout
    students_per_room: int
    assignments: Tuple[SeatAssignment, ...] = field(default_factory=tuple)

    @property
    def room_count(self) -> int:
        return len(self.rooms)

    @property
    def seated_count(self) -> int:
        return len(self.assignments)

    def locate(self, identifier: str) -> Optional[SeatAssignment]:
        """Returns the first seat holding this identifier, or None."""
        for assignment in self.assignments:
            if assignment.candidate.identifier == identifier:
                return assignment
        return None

    def room_assignments(self, room_index: int) -> List[SeatAssignment]:
        """Seats of one room in row-major order."""
        seats = [a for a in self.assignments if a.room == room_index]
        seats.sort(key=lambda a: (a.row, a.col))
        return seats

    def to_dict(self) -> Dict[str, Any]:
        return {
            "students_per_room": self.students_per_room,
            "layout": {"rows": self.layout.rows, "cols": self.layout.cols},
            "rooms": [room.to_rows() for room in self.rooms],
            "assignments": [
                {
                    "identifier": a.candidate.identifier,
                    "branch": a.candidate.branch,
                    "room": a.room,
                    "row": a.row,
                    "col": a.col,
                }
                for a in self.assignments
            ],
        }
