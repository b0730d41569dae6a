"""
seatplan/validators.py

Post-generation checks and statistics for a seating plan.
"""

from collections import Counter
from typing import List, Dict, Tuple, Iterable, Optional
from .models import SeatingPlan
from . import utils


def validate_plan(plan: SeatingPlan, identifiers: Iterable[str]) -> bool:
    """
    Runs all validation checks and prints a report.
    Adjacent same-branch seats are reported but do not fail validation,
    they are an accepted relaxation.
    """
    print("\n--- RUNNING POST-GENERATION VALIDATION ---")

    coverage_problems = check_coverage(plan, identifiers)
    shape_problems = check_room_shapes(plan)
    adjacency_conflicts = find_adjacent_conflicts(plan)

    if adjacency_conflicts:
        print(f"  ⚠ Warning: {len(adjacency_conflicts)} adjacent same-branch pairs.")
        for c in adjacency_conflicts: print(f"    - {c}")

    if not coverage_problems and not shape_problems:
        print(f"Validation PASSED: {plan.seated_count} candidates seated in {plan.room_count} rooms.")
        return True
    else:
        print("Validation FAILED:")
        if coverage_problems:
            print(f"  Found {len(coverage_problems)} coverage errors.")
            for c in coverage_problems: print(f"    - {c}")
        if shape_problems:
            print(f"  Found {len(shape_problems)} room shape errors.")
            for c in shape_problems: print(f"    - {c}")
        return False


def check_settings(students_per_room, rows, cols) -> List[str]:
    """
    Checks the settings against the ranges the settings form allows.
    """
    problems = []
    limits = [
        ("Students per room", students_per_room, utils.MAX_STUDENTS_PER_ROOM),
        ("Rows", rows, utils.MAX_ROOM_DIMENSION),
        ("Columns", cols, utils.MAX_ROOM_DIMENSION),
    ]
    for label, value, maximum in limits:
        if not utils.is_positive_int(value):
            problems.append(f"{label} must be a positive whole number (got {value!r})")
        elif value > maximum:
            problems.append(f"{label} must be between 1 and {maximum} (got {value})")
    return problems


def check_coverage(plan: SeatingPlan, identifiers: Iterable[str]) -> List[str]:
    """
    Compares the seated identifiers with the input, counting duplicates.
    """
    expected = Counter(identifiers)
    seated = Counter(
        candidate.identifier
        for room in plan.rooms
        for _, _, candidate in room.occupied_seats()
    )
    problems = []
    for ticket in sorted(expected - seated):
        problems.append(f"Not seated: {ticket}")
    for ticket, count in sorted((seated - expected).items()):
        problems.append(f"Seated {count} extra time(s): {ticket}")
    return problems


def check_room_shapes(plan: SeatingPlan) -> List[str]:
    problems = []
    for room in plan.rooms:
        if room.rows != plan.layout.rows or any(len(r) != plan.layout.cols for r in room.grid):
            problems.append(
                f"Room {room.index + 1} is not {plan.layout.rows}x{plan.layout.cols}"
            )
    return problems


def find_adjacent_conflicts(plan: SeatingPlan) -> List[str]:
    """
    One line per pair of neighbouring seats (same row or same column)
    holding the same branch.
    """
    conflicts = []
    for room in plan.rooms:
        for r in range(room.rows):
            for c in range(room.cols):
                here = room.grid[r][c]
                if here is None:
                    continue
                for nr, nc in ((r, c + 1), (r + 1, c)):
                    if nr >= room.rows or nc >= room.cols:
                        continue
                    there = room.grid[nr][nc]
                    if there is not None and there.branch == here.branch:
                        conflicts.append(
                            f"Room {room.index + 1} ({r},{c})-({nr},{nc}): {here.branch}"
                        )
    return conflicts


def count_adjacent_conflicts(plan: SeatingPlan) -> int:
    return len(find_adjacent_conflicts(plan))


def branch_statistics(plan: SeatingPlan) -> List[Tuple[str, int, float]]:
    """(branch, count, percentage of all seated) sorted by branch name."""
    counts: Dict[str, int] = Counter(a.candidate.branch for a in plan.assignments)
    total = sum(counts.values())
    if total == 0:
        return []
    return [
        (branch, count, round(count * 100.0 / total, 2))
        for branch, count in sorted(counts.items())
    ]


def room_summary(plan: SeatingPlan,
                 room_names: Optional[List[str]] = None) -> List[Tuple[str, int, List[str]]]:
    """(room name, students seated, branches present) per room."""
    names = resolve_room_names(plan, room_names)
    return [
        (names[room.index], room.student_count, room.branches())
        for room in plan.rooms
    ]


def resolve_room_names(plan: SeatingPlan, room_names: Optional[List[str]] = None) -> List[str]:
    """Caller names where given, 'Room n' for the rest."""
    names = utils.default_room_names(plan.room_count)
    for i, name in enumerate(room_names or []):
        if i < len(names) and name and str(name).strip():
            names[i] = str(name).strip()
    return names
