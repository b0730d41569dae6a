"""
tests/test_sequencer.py

Unit tests for the hall ticket ordering.
Requires 'pytest' to run.
"""
import random
from seatplan.sequencer import sequence
from seatplan.classifier import classify
from seatplan.utils import get_numeric_suffix


def test_grouped_by_branch_name():
    tickets = ["259F1A0501", "259F1A0101", "259F1A0401", "259F1A0201"]
    ordered = sequence(tickets)
    assert [classify(t) for t in ordered] == ["CIVIL", "CSE", "ECE", "EEE"]


def test_numeric_order_within_branch():
    tickets = ["259F1A0510", "259F1A0502", "259F1A0501", "259F1A0509"]
    assert sequence(tickets) == ["259F1A0501", "259F1A0502", "259F1A0509", "259F1A0510"]


def test_numeric_not_lexicographic():
    # Same branch, suffixes 0599 vs 05100 -> 599 vs 5100
    tickets = ["AB05100", "AB0599"]
    assert sequence(tickets) == ["AB0599", "AB05100"]


def test_no_suffix_falls_back_to_text():
    assert sequence(["ZZZ", "AAA", "MMM"]) == ["AAA", "MMM", "ZZZ"]


def test_order_independent_of_input_order():
    tickets = [f"259F1A{code}{n:02d}" for code in ("01", "04", "05", "12") for n in range(1, 15)]
    expected = sequence(tickets)
    for seed in range(5):
        shuffled = tickets[:]
        random.Random(seed).shuffle(shuffled)
        assert sequence(shuffled) == expected


def test_numeric_suffix_helper():
    assert get_numeric_suffix("259F1A0501") == 501
    assert get_numeric_suffix("AB123456") == 3456
    assert get_numeric_suffix("ABC5") is None
    assert get_numeric_suffix("ABC") is None
