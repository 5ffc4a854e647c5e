"""
Day window filtering.

Keeps the events overlapping the local calendar day that contains a
reference instant:

    start_local <= end_of_day AND end_local >= start_of_day

Both ends are inclusive, so an event ending exactly at midnight still
touches the following day. Input order is preserved; nothing is sorted.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Iterable, List, Optional, Tuple

from kioskday.event_time import TimezoneSpec, resolve_timezone
from kioskday.model import NormalizedEvent


def to_local_wall_clock(now: Optional[datetime], local_tz: TimezoneSpec = None) -> datetime:
    """
    Express now as a naive local datetime.

    Aware values are converted to the local zone; naive values are taken to
    be local already. None means the current time.
    """
    zone = resolve_timezone(local_tz)
    if now is None:
        return datetime.now(zone).replace(tzinfo=None)
    if now.tzinfo is None:
        return now
    return now.astimezone(zone).replace(tzinfo=None)


def day_bounds(now: Optional[datetime] = None, local_tz: TimezoneSpec = None) -> Tuple[datetime, datetime]:
    """
    Return (start_of_day, end_of_day) of the local day containing now.
    """
    local_now = to_local_wall_clock(now, local_tz)
    start = datetime.combine(local_now.date(), time.min)
    end = start + timedelta(days=1) - timedelta(microseconds=1)
    return start, end


def overlaps_day(event: NormalizedEvent, start_of_day: datetime, end_of_day: datetime) -> bool:
    return event.start_local <= end_of_day and event.end_local >= start_of_day


def filter_day_window(
    events: Iterable[NormalizedEvent],
    now: Optional[datetime] = None,
    local_tz: TimezoneSpec = None,
) -> List[NormalizedEvent]:
    """
    Return the events overlapping the local day of now, in input order.
    """
    start, end = day_bounds(now, local_tz)
    return [ev for ev in events if overlaps_day(ev, start, end)]
