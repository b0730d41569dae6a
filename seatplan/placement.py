"""
seatplan/placement.py

The seat placement engine: fills rooms in snake order so that no two
neighbouring seats (left, right, front, back) hold the same branch,
relaxing that rule only when every candidate could not otherwise be seated.
"""

import math
from typing import List, Optional, Tuple, Sequence, Iterable
from .models import Candidate, RoomLayout, Room, SeatAssignment, SeatingPlan
from .classifier import BranchClassifier, DEFAULT_CLASSIFIER
from .sequencer import sequence
from . import utils

_Seat = Tuple[int, int, int]  # (room, row, col)


class InvalidConfigurationError(ValueError):
    """Raised when the room layout or room capacity is not a positive integer."""


class SeatingPlanError(RuntimeError):
    """Raised when plan generation fails for any unexpected reason."""


class SeatPlacementEngine:
    """
    Places an ordered candidate list into rooms of a fixed layout.
    One engine instance handles one run; all working state is local to it.
    """

    def __init__(self, layout: RoomLayout, students_per_room: int,
                 lookahead_window: int = utils.LOOKAHEAD_WINDOW):
        validate_configuration(layout, students_per_room)
        self.layout = layout
        self.rows = layout.rows
        self.cols = layout.cols
        self.students_per_room = students_per_room
        self.lookahead_window = lookahead_window

        self.rooms: List[List[List[Optional[Candidate]]]] = []
        self.queue: List[Candidate] = []
        self.next_index = 0
        self.assignments: List[SeatAssignment] = []

    # --- Helpers ---

    def _new_room(self) -> List[List[Optional[Candidate]]]:
        room = [[None] * self.cols for _ in range(self.rows)]
        self.rooms.append(room)
        return room

    def _is_valid_position(self, room_index: int, row: int, col: int, branch: str) -> bool:
        room = self.rooms[room_index]
        neighbours = []
        if col > 0:
            neighbours.append(room[row][col - 1])
        if col < self.cols - 1:
            neighbours.append(room[row][col + 1])
        if row > 0:
            neighbours.append(room[row - 1][col])
        if row < self.rows - 1:
            neighbours.append(room[row + 1][col])
        return all(n is None or n.branch != branch for n in neighbours)

    def _remaining(self) -> int:
        return len(self.queue) - self.next_index

    def _seat_next(self, seat: _Seat):
        """Seats the candidate at the front of the queue."""
        room_index, row, col = seat
        candidate = self.queue[self.next_index]
        self.rooms[room_index][row][col] = candidate
        self.assignments.append(SeatAssignment(candidate, room_index, row, col))
        self.next_index += 1

    def _swap_to_front(self, index: int):
        front = self.next_index
        self.queue[front], self.queue[index] = self.queue[index], self.queue[front]

    def _find_valid(self, seat: _Seat, start: int, stop: int) -> Optional[int]:
        """First queue index in [start, stop) whose branch may sit here."""
        room_index, row, col = seat
        for i in range(start, min(stop, len(self.queue))):
            if self._is_valid_position(room_index, row, col, self.queue[i].branch):
                return i
        return None

    def _snake_positions(self, room_count: int) -> List[_Seat]:
        positions = []
        for room_index in range(room_count):
            for row in range(self.rows):
                cols = range(self.cols) if row % 2 == 0 else range(self.cols - 1, -1, -1)
                for col in cols:
                    positions.append((room_index, row, col))
        return positions

    def _empty_seats(self) -> List[_Seat]:
        return [
            (room_index, row, col)
            for room_index, room in enumerate(self.rooms)
            for row in range(self.rows)
            for col in range(self.cols)
            if room[row][col] is None
        ]

    # --- Phases ---

    def _place_sequentially(self):
        """Phase 1: snake order with a bounded look-ahead swap."""
        for seat in self._snake_positions(len(self.rooms)):
            if self._remaining() == 0:
                break
            room_index, row, col = seat
            current = self.queue[self.next_index]

            if self._is_valid_position(room_index, row, col, current.branch):
                self._seat_next(seat)
                continue

            swap_index = self._find_valid(
                seat, self.next_index + 1, self.next_index + self.lookahead_window
            )
            if swap_index is not None:
                self._swap_to_front(swap_index)
                self._seat_next(seat)
            # else: the seat stays empty for the gap-filling pass

    def _fill_gaps(self):
        """Phase 2: every empty seat takes someone, valid or not."""
        for seat in self._empty_seats():
            if self._remaining() == 0:
                break
            swap_index = self._find_valid(seat, self.next_index, len(self.queue))
            if swap_index is not None:
                self._swap_to_front(swap_index)
            self._seat_next(seat)

    def _allocate_overflow_rooms(self):
        """Phase 3: append rooms until the queue is empty."""
        while self._remaining() > 0:
            self._new_room()
            room_index = len(self.rooms) - 1
            for row in range(self.rows):
                for col in range(self.cols):
                    if self._remaining() == 0:
                        return
                    seat = (room_index, row, col)
                    swap_index = self._find_valid(seat, self.next_index, len(self.queue))
                    if swap_index is not None:
                        self._swap_to_front(swap_index)
                    self._seat_next(seat)

    def _freeze(self) -> SeatingPlan:
        rooms = tuple(
            Room(index=i, grid=tuple(tuple(row) for row in grid))
            for i, grid in enumerate(self.rooms)
        )
        return SeatingPlan(
            rooms=rooms,
            layout=self.layout,
            students_per_room=self.students_per_room,
            assignments=tuple(self.assignments),
        )

    def run(self, candidates: Iterable[Candidate]) -> SeatingPlan:
        self.queue = list(candidates)
        self.next_index = 0
        self.rooms = []
        self.assignments = []

        room_count = math.ceil(len(self.queue) / self.students_per_room)
        for _ in range(room_count):
            self._new_room()

        self._place_sequentially()
        if self._remaining() > 0:
            self._fill_gaps()
        if self._remaining() > 0:
            self._allocate_overflow_rooms()

        return self._freeze()


def validate_configuration(layout: RoomLayout, students_per_room: int):
    problems = []
    if not utils.is_positive_int(layout.rows):
        problems.append(f"rows must be a positive integer (got {layout.rows!r})")
    if not utils.is_positive_int(layout.cols):
        problems.append(f"cols must be a positive integer (got {layout.cols!r})")
    if not utils.is_positive_int(students_per_room):
        problems.append(f"students per room must be a positive integer (got {students_per_room!r})")
    if problems:
        raise InvalidConfigurationError("Invalid seating configuration: " + "; ".join(problems))


def place(candidates: Sequence[Candidate], students_per_room: int,
          layout: RoomLayout) -> SeatingPlan:
    """
    Seats every candidate, in the given order, into rooms of the given layout.

    Raises InvalidConfigurationError for non-positive settings and
    SeatingPlanError if anything else goes wrong; no partial plan is returned.
    """
    engine = SeatPlacementEngine(layout, students_per_room)
    try:
        return engine.run(candidates)
    except Exception as e:
        raise SeatingPlanError("seating plan generation failed") from e


def build_seating_plan(identifiers: Iterable[str], students_per_room: int,
                       layout: RoomLayout,
                       classifier: Optional[BranchClassifier] = None) -> SeatingPlan:
    """
    Full pipeline: order the hall tickets, tag each with its branch, place them.
    """
    classifier = classifier or DEFAULT_CLASSIFIER
    validate_configuration(layout, students_per_room)
    try:
        ordered = sequence(identifiers, classifier)
        candidates = [Candidate(ticket, classifier.classify(ticket)) for ticket in ordered]
    except Exception as e:
        raise SeatingPlanError("seating plan generation failed") from e
    return place(candidates, students_per_room, layout)
