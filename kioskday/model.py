"""
Central data model definitions used across the project.

This module defines the canonical structure of document nodes and calendar
events so that:
- the image engine and the time engine share the same field names
- data flowing from the fetch layer into the core keeps a stable shape
- the CLI can render results without knowing how they were computed
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple


WEEKDAYS: Tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# weekday -> image source
DayImageMap = Dict[str, str]

NO_TITLE = "No title"


@dataclass(frozen=True)
class DocumentNode:
    """
    One element of a linearized document.

    Image nodes carry their source reference, all other nodes carry
    (possibly empty) text.
    """

    index: int
    text: str = ""
    is_image: bool = False
    image_source: Optional[str] = None


@dataclass(frozen=True)
class DayLabelMatch:
    weekday: str
    index: int


@dataclass
class RawEventRecord:
    """
    Represents one calendar event as received from the calendar source.

    start_raw / end_raw are the API payloads, e.g. {"date": "2025-03-10"}
    or {"dateTime": "2025-03-10T23:30:00Z"}.
    """

    id: str
    title: str
    start_raw: Dict[str, Any]
    end_raw: Optional[Dict[str, Any]] = None

    @property
    def is_all_day(self) -> bool:
        return not self.start_raw.get("dateTime")

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "RawEventRecord":
        """
        Build a record from a Google Calendar event resource.

        Raises ValueError if the item has no usable start payload.
        """
        start = item.get("start")
        if not isinstance(start, dict) or not (start.get("date") or start.get("dateTime")):
            raise ValueError(f"Event {item.get('id')!r} has no start")

        end = item.get("end")
        if not isinstance(end, dict) or not (end.get("date") or end.get("dateTime")):
            end = None

        return cls(
            id=str(item.get("id", "")),
            title=str(item.get("summary") or NO_TITLE),
            start_raw=start,
            end_raw=end,
        )


@dataclass
class NormalizedEvent:
    """
    Canonical, display-ready event.

    start_local / end_local are naive datetimes holding local wall-clock
    values. For all-day events they sit at local midnight.
    """

    id: str
    title: str
    start_local: datetime
    end_local: datetime
    is_all_day: bool = False

    def _fmt(self, dt: datetime) -> str:
        if self.is_all_day:
            return dt.date().isoformat()
        return dt.strftime("%Y-%m-%dT%H:%M:%S")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "start": self._fmt(self.start_local),
            "end": self._fmt(self.end_local),
            "all_day": self.is_all_day,
        }


@dataclass
class NormalizationResult:
    """
    Outcome of normalizing a batch of events.

    dropped holds (event_id, reason) for every event that failed.
    """

    events: List[NormalizedEvent] = field(default_factory=list)
    dropped: List[Tuple[str, str]] = field(default_factory=list)
