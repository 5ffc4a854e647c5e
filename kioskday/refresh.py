"""
Refresh jobs.

Each job fetches fresh data with the current access token, runs it through
the core and offers the result to a ResultArbiter. The sequence number is
taken before fetching, so a slow fetch that finishes after a newer one is
discarded.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from kioskday.arbiter import ResultArbiter
from kioskday.associate import extract_day_images
from kioskday.day_window import day_bounds, filter_day_window, to_local_wall_clock
from kioskday.event_time import normalize_api_events, resolve_timezone
from kioskday.google_api import GoogleAPIError, export_document_html, find_document_by_name, list_calendar_events
from kioskday.model import DayImageMap, NormalizationResult
from kioskday.settings import Settings

logger = logging.getLogger(__name__)


def refresh_day_images(
    token: Optional[str],
    settings: Settings,
    arbiter: ResultArbiter[DayImageMap],
) -> bool:
    """
    Fetch the schedule document and rebuild the weekday/image mapping.

    Returns True if the new mapping was accepted.
    """
    seq = arbiter.begin()
    document_id = find_document_by_name(token, settings.document_name)
    html = export_document_html(token, document_id)
    mapping = extract_day_images(html)

    accepted = arbiter.offer(seq, mapping)
    if not accepted:
        logger.info("Discarding stale day image result #%d", seq)
    return accepted


def refresh_today_events(
    token: Optional[str],
    settings: Settings,
    arbiter: ResultArbiter[NormalizationResult],
    now: Optional[datetime] = None,
) -> bool:
    """
    Fetch calendar events from the start of today and keep today's ones.

    The accepted result holds the visible events plus the dropped ones.
    Returns True if the new result was accepted.
    """
    seq = arbiter.begin()
    zone = resolve_timezone(settings.timezone)
    # read the clock once so the fetch window and the filter agree on "today"
    local_now = to_local_wall_clock(now, zone)
    start_of_day, _ = day_bounds(local_now, zone)

    items = list_calendar_events(
        token,
        calendar_id=settings.calendar_id,
        max_results=settings.max_results,
        time_min=start_of_day.replace(tzinfo=zone).isoformat(),
    )
    result = normalize_api_events(items, zone)
    visible = NormalizationResult(
        events=filter_day_window(result.events, local_now, zone),
        dropped=result.dropped,
    )

    accepted = arbiter.offer(seq, visible)
    if not accepted:
        logger.info("Discarding stale event result #%d", seq)
    return accepted


def run_periodic(job: Callable[[], object], interval: float, stop_event: threading.Event) -> None:
    """
    Run job now and then every interval seconds until stop_event is set.

    Fetch failures are logged and the loop keeps going; the previous
    accepted result stays visible in the meantime.
    """
    while not stop_event.is_set():
        try:
            job()
        except GoogleAPIError as err:
            logger.warning("Refresh failed: %s", err)
        stop_event.wait(interval)
