"""
Event time normalization.

Calendar timestamps arrive in three shapes:
- {"date": "2025-03-10"}                      all-day, already local
- {"dateTime": "2025-03-10T23:30:00Z"}        UTC
- {"dateTime": "2025-03-10T19:30:00-04:00"}   explicit offset

A dateTime without any zone marker is treated as UTC so it is never
silently dropped.

Every timed value is converted to the local zone and returned as a naive
datetime (local wall-clock, no tzinfo), so nobody downstream converts twice.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo
from typing import Any, Dict, Iterable, Optional, Union

from dateutil import parser as dateutil_parser
from dateutil import tz as dateutil_tz

from kioskday.model import NormalizationResult, NormalizedEvent, RawEventRecord

logger = logging.getLogger(__name__)

TimezoneSpec = Union[str, tzinfo, None]


class EventTimeError(ValueError):
    """
    Raised when a single event cannot be normalized.
    """


def resolve_timezone(spec: TimezoneSpec = None) -> tzinfo:
    """
    Turn None (runtime local zone), an IANA name or a tzinfo into a tzinfo.

    Raises ValueError for unknown zone names.
    """
    if spec is None or (isinstance(spec, str) and not spec.strip()):
        return dateutil_tz.tzlocal()
    if isinstance(spec, tzinfo):
        return spec
    zone = dateutil_tz.gettz(spec.strip())
    if zone is None:
        raise ValueError(f"Unknown timezone: {spec!r}")
    return zone


def _parse_date(value: Any) -> datetime:
    """
    Parse 'YYYY-MM-DD' into a naive datetime at midnight.
    """
    if not isinstance(value, str):
        raise EventTimeError(f"Invalid date value: {value!r}")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d")
    except ValueError as err:
        raise EventTimeError(f"Invalid date value: {value!r}") from err


def _parse_date_time(value: Any, local_tz: tzinfo) -> datetime:
    """
    Parse an ISO 8601 timestamp and convert it to naive local wall-clock.
    """
    if not isinstance(value, str) or not value.strip():
        raise EventTimeError(f"Invalid dateTime value: {value!r}")
    raw = value.strip()
    try:
        dt = dateutil_parser.isoparse(raw)
    except (ValueError, OverflowError) as err:
        raise EventTimeError(f"Invalid dateTime value: {value!r}") from err

    # "...Z" comes back as UTC, "+hh:mm" keeps its offset, no marker -> UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=dateutil_tz.UTC)

    try:
        return dt.astimezone(local_tz).replace(tzinfo=None)
    except (OverflowError, OSError) as err:
        raise EventTimeError(f"dateTime out of range in local time: {value!r}") from err


def _parse_payload(payload: Dict[str, Any], all_day: bool, local_tz: tzinfo) -> datetime:
    if all_day:
        if payload.get("date"):
            return _parse_date(payload["date"])
        # all-day start paired with a timed end: keep only the local date
        local = _parse_date_time(payload.get("dateTime"), local_tz)
        return local.replace(hour=0, minute=0, second=0, microsecond=0)

    if payload.get("dateTime"):
        return _parse_date_time(payload["dateTime"], local_tz)
    return _parse_date(payload.get("date"))


def normalize_event(record: RawEventRecord, local_tz: TimezoneSpec = None) -> NormalizedEvent:
    """
    Normalize one raw event.

    Raises EventTimeError if a timestamp cannot be parsed or the event ends
    before it starts.
    """
    zone = resolve_timezone(local_tz)
    all_day = record.is_all_day

    start = _parse_payload(record.start_raw, all_day, zone)
    if record.end_raw:
        end = _parse_payload(record.end_raw, all_day, zone)
    else:
        try:
            end = start + timedelta(days=1)
        except OverflowError as err:
            raise EventTimeError(f"Event {record.id!r} has no end and starts too late to add one") from err

    if end < start:
        raise EventTimeError(f"Event {record.id!r} ends before it starts")

    return NormalizedEvent(
        id=record.id,
        title=record.title,
        start_local=start,
        end_local=end,
        is_all_day=all_day,
    )


def normalize_events(records: Iterable[RawEventRecord], local_tz: TimezoneSpec = None) -> NormalizationResult:
    """
    Normalize a batch. Failing events are dropped and reported, the rest
    keep their input order.
    """
    zone = resolve_timezone(local_tz)
    result = NormalizationResult()

    for record in records:
        try:
            result.events.append(normalize_event(record, zone))
        except EventTimeError as err:
            logger.warning("Dropping event %r: %s", record.id, err)
            result.dropped.append((record.id, str(err)))

    if result.dropped:
        logger.warning("Dropped %d of %d events", len(result.dropped), len(result.dropped) + len(result.events))
    return result


def normalize_api_events(items: Iterable[Dict[str, Any]], local_tz: Optional[TimezoneSpec] = None) -> NormalizationResult:
    """
    Same as normalize_events, starting from Calendar API event resources.
    """
    zone = resolve_timezone(local_tz)
    result = NormalizationResult()

    for item in items:
        event_id = str(item.get("id", "")) if isinstance(item, dict) else ""
        try:
            if not isinstance(item, dict):
                raise EventTimeError(f"Event payload is not an object: {item!r}")
            record = RawEventRecord.from_api(item)
            result.events.append(normalize_event(record, zone))
        except ValueError as err:
            logger.warning("Dropping event %r: %s", event_id, err)
            result.dropped.append((event_id, str(err)))

    if result.dropped:
        logger.warning("Dropped %d of %d events", len(result.dropped), len(result.dropped) + len(result.events))
    return result
