"""
seatplan/classifier.py

Derives a branch label from a hall ticket number.
"""

import re
from types import MappingProxyType
from typing import Mapping, Optional, List
from . import utils

_MARKER_CODE = re.compile(re.escape(utils.BRANCH_MARKER) + r"(\d{2})")
_TRAILING_CODE = re.compile(r"[A-Z]+(\d{2})\d+$")
_EMBEDDED_CODE = re.compile(r"[A-Z]+(\d{2})\d+")
_TWO_DIGITS = re.compile(r"^\d{2}$")
# Lookahead so overlapping pairs ("0501" -> 05, 50, 01) are all seen
_ANY_PAIR = re.compile(r"(?=(\d{2}))")


class BranchClassifier:
    """
    Maps hall ticket numbers to branch names through a fixed code table.
    """

    def __init__(self, branch_map: Optional[Mapping[str, str]] = None):
        table = dict(utils.BRANCH_MAP if branch_map is None else branch_map)
        self.branch_map: Mapping[str, str] = MappingProxyType(table)

    def extract_code(self, identifier) -> Optional[str]:
        """
        Returns the two-digit branch code embedded in the identifier,
        or None when no rule finds one.
        """
        if not isinstance(identifier, str) or not identifier:
            return None
        ticket = identifier.strip().upper()

        match = _MARKER_CODE.search(ticket)
        if match:
            return match.group(1)

        match = _TRAILING_CODE.search(ticket)
        if match:
            return match.group(1)

        match = _EMBEDDED_CODE.search(ticket)
        if match:
            return match.group(1)

        if len(ticket) == 10:
            for start in (5, 7):
                code = ticket[start:start + 2]
                if _TWO_DIGITS.match(code):
                    return code

        return self._scan_pairs(ticket)

    def _scan_pairs(self, ticket: str) -> Optional[str]:
        pairs: List[str] = _ANY_PAIR.findall(ticket)
        for pair in pairs:
            if pair in self.branch_map:
                return pair
        if len(pairs) >= 2:
            return pairs[-2]
        if pairs:
            return pairs[0]
        return None

    def classify(self, identifier) -> str:
        code = self.extract_code(identifier)
        if code is None:
            return utils.UNKNOWN_BRANCH
        if code in self.branch_map:
            return self.branch_map[code]
        return f"{utils.UNKNOWN_BRANCH}-{code}"

    def __call__(self, identifier) -> str:
        return self.classify(identifier)


DEFAULT_CLASSIFIER = BranchClassifier()


def classify(identifier) -> str:
    """Classifies with the default branch table."""
    return DEFAULT_CLASSIFIER.classify(identifier)
