"""
seatplan - exam seating plan generator.
"""

from .models import Candidate, RoomLayout, Room, SeatAssignment, SeatingPlan
from .classifier import BranchClassifier, classify
from .sequencer import sequence
from .placement import (
    place, build_seating_plan, SeatPlacementEngine,
    InvalidConfigurationError, SeatingPlanError,
)
