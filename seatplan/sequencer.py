"""
seatplan/sequencer.py

Orders hall tickets branch by branch, and numerically within a branch,
so that consecutive seats hold consecutive roll numbers where possible.
"""

from functools import cmp_to_key
from typing import Iterable, List, Optional, Tuple
from .classifier import BranchClassifier, DEFAULT_CLASSIFIER
from . import utils

_Entry = Tuple[str, str, Optional[int]]


def _compare(a: _Entry, b: _Entry) -> int:
    a_ticket, a_branch, a_suffix = a
    b_ticket, b_branch, b_suffix = b

    if a_branch != b_branch:
        return -1 if a_branch < b_branch else 1

    if a_suffix is not None and b_suffix is not None and a_suffix != b_suffix:
        return -1 if a_suffix < b_suffix else 1

    if a_ticket != b_ticket:
        return -1 if a_ticket < b_ticket else 1
    return 0


def sequence(identifiers: Iterable[str],
             classifier: Optional[BranchClassifier] = None) -> List[str]:
    """
    Returns the identifiers in processing order.
    The result only depends on the multiset of inputs, not their order.
    """
    classifier = classifier or DEFAULT_CLASSIFIER
    entries: List[_Entry] = [
        (ticket, classifier.classify(ticket), utils.get_numeric_suffix(ticket))
        for ticket in sorted(identifiers)
    ]
    entries.sort(key=cmp_to_key(_compare))
    return [ticket for ticket, _, _ in entries]
