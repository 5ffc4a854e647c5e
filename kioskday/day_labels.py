"""
Day label detection.

A day label is a weekday name or its three-letter abbreviation followed by a
colon, e.g. "Monday:", "tue :", "SUN:". Matching is case-insensitive.

Rule: first occurrence wins. Once a weekday has been seen, later labels for
the same weekday are ignored.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Pattern

from kioskday.model import WEEKDAYS, DayLabelMatch, DocumentNode

logger = logging.getLogger(__name__)


def _compile_patterns() -> Dict[str, Pattern[str]]:
    patterns: Dict[str, Pattern[str]] = {}
    for day in WEEKDAYS:
        abbrev = day[:3]
        patterns[day] = re.compile(rf"\b(?:{day}|{abbrev})\s*:", re.IGNORECASE)
    return patterns


_DAY_PATTERNS = _compile_patterns()


def weekdays_in_text(text: str) -> List[str]:
    """
    Return the canonical weekdays labelled in text, in canonical order.
    """
    if not text:
        return []
    return [day for day, pat in _DAY_PATTERNS.items() if pat.search(text)]


def scan_day_labels(nodes: Iterable[DocumentNode]) -> List[DayLabelMatch]:
    """
    Scan a node sequence for day labels.

    Returns at most one match per weekday, ordered by node index.
    An empty list means no schedule was found.
    """
    matches: List[DayLabelMatch] = []
    seen: set[str] = set()

    for node in nodes:
        if node.is_image:
            continue
        for day in weekdays_in_text(node.text):
            if day in seen:
                continue
            seen.add(day)
            matches.append(DayLabelMatch(weekday=day, index=node.index))
            logger.debug("Found %s at node %d", day, node.index)

    logger.debug("Found %d day labels", len(matches))
    return matches
