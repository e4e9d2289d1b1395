"""Free-text street name matching against schedule corridors"""
import re
from typing import List, Sequence, Set

from .models import ScheduleSegment

# Long form -> abbreviation, as used by the schedule's corridor names
STREET_ABBREVIATIONS = (
    ("street", "st"),
    ("avenue", "ave"),
    ("boulevard", "blvd"),
    ("drive", "dr"),
    ("road", "rd"),
)

_HOUSE_NUMBER = re.compile(r"^\d+\s+")

# Corridors up to this length are too generic to match as a substring of the query
MAX_TRIVIAL_CORRIDOR_LENGTH = 3


def _replace_word(text: str, old: str, new: str) -> str:
    return re.sub(rf"\b{re.escape(old)}\b", new, text)


def street_name_candidates(query_text: str) -> List[str]:
    """
    Normalized spellings to try for a street reference.

    "123 Market Street" -> ["market street", "market st"]
    """
    if not query_text:
        return []

    base = _HOUSE_NUMBER.sub("", query_text.strip().lower()).strip()

    abbreviated = base
    expanded = base
    for long_form, short_form in STREET_ABBREVIATIONS:
        abbreviated = _replace_word(abbreviated, long_form, short_form)
        expanded = _replace_word(expanded, short_form, long_form)

    candidates: List[str] = []
    seen: Set[str] = set()
    for candidate in (base, abbreviated, expanded):
        if candidate and candidate not in seen:
            seen.add(candidate)
            candidates.append(candidate)
    return candidates


def corridor_matches(corridor: str, candidates: Sequence[str]) -> bool:
    name = (corridor or "").lower()
    if not name:
        return False
    for candidate in candidates:
        if name == candidate or candidate in name:
            return True
        if name in candidate and len(name) > MAX_TRIVIAL_CORRIDOR_LENGTH:
            return True
    return False


def match_by_street_name(segments: Sequence[ScheduleSegment], query_text: str) -> List[ScheduleSegment]:
    """
    Segments whose corridor matches the query, sorted by corridor name.

    An empty list is a normal "no match" result.
    """
    candidates = street_name_candidates(query_text)
    if not candidates:
        return []
    matches = [s for s in segments if corridor_matches(s.corridor, candidates)]
    return sorted(matches, key=lambda s: s.corridor)
