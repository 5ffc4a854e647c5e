"""
Unit tests for the day window filter.

Overlap rule (inclusive):
    start_local <= end_of_day AND end_local >= start_of_day
"""

import unittest
from datetime import datetime, timedelta

from dateutil import tz

from kioskday.day_window import day_bounds, filter_day_window
from kioskday.event_time import normalize_api_events
from kioskday.model import NormalizedEvent

UTC_MINUS_4 = tz.tzoffset(None, -4 * 3600)


def _event(event_id: str, start: datetime, hours: float = 1, all_day: bool = False) -> NormalizedEvent:
    return NormalizedEvent(
        id=event_id,
        title=event_id,
        start_local=start,
        end_local=start + timedelta(hours=hours),
        is_all_day=all_day,
    )


class TestDayBounds(unittest.TestCase):
    def test_naive_now_is_local(self) -> None:
        start, end = day_bounds(datetime(2025, 3, 10, 15, 45), UTC_MINUS_4)
        self.assertEqual(start, datetime(2025, 3, 10))
        self.assertEqual(end, datetime(2025, 3, 10, 23, 59, 59, 999999))

    def test_aware_now_is_converted(self) -> None:
        now = datetime(2025, 6, 1, 2, 0, tzinfo=tz.UTC)
        start, _ = day_bounds(now, UTC_MINUS_4)
        self.assertEqual(start, datetime(2025, 5, 31))


class TestFilterDayWindow(unittest.TestCase):
    def test_keeps_only_today_in_input_order(self) -> None:
        events = [
            _event("late", datetime(2025, 3, 10, 20)),
            _event("yesterday", datetime(2025, 3, 9, 10)),
            _event("early", datetime(2025, 3, 10, 8)),
            _event("tomorrow", datetime(2025, 3, 11, 9)),
        ]
        kept = filter_day_window(events, datetime(2025, 3, 10, 12), UTC_MINUS_4)
        self.assertEqual([ev.id for ev in kept], ["late", "early"])

    def test_event_spanning_midnight_is_kept(self) -> None:
        events = [_event("overnight", datetime(2025, 3, 9, 22), hours=4)]
        kept = filter_day_window(events, datetime(2025, 3, 10, 12), UTC_MINUS_4)
        self.assertEqual(len(kept), 1)

    def test_all_day_event(self) -> None:
        events = [_event("holiday", datetime(2025, 3, 10), hours=24, all_day=True)]
        self.assertEqual(len(filter_day_window(events, datetime(2025, 3, 10, 9), UTC_MINUS_4)), 1)
        self.assertEqual(len(filter_day_window(events, datetime(2025, 3, 12, 9), UTC_MINUS_4)), 0)

    def test_idempotent(self) -> None:
        events = [
            _event("a", datetime(2025, 3, 10, 8)),
            _event("b", datetime(2025, 3, 11, 8)),
            _event("c", datetime(2025, 3, 10, 23, 30)),
        ]
        now = datetime(2025, 3, 10, 12)
        once = filter_day_window(events, now, UTC_MINUS_4)
        twice = filter_day_window(once, now, UTC_MINUS_4)
        self.assertEqual(once, twice)

    def test_utc_event_on_previous_local_day(self) -> None:
        items = [
            {
                "id": "1",
                "summary": "Late show",
                "start": {"dateTime": "2025-06-01T02:00:00Z"},
                "end": {"dateTime": "2025-06-01T03:00:00Z"},
            }
        ]
        result = normalize_api_events(items, UTC_MINUS_4)
        self.assertEqual(result.events[0].to_dict()["start"], "2025-05-31T22:00:00")

        now = datetime(2025, 5, 31, 23, 0, tzinfo=UTC_MINUS_4)
        kept = filter_day_window(result.events, now, UTC_MINUS_4)
        self.assertEqual([ev.id for ev in kept], ["1"])

    def test_empty_input(self) -> None:
        self.assertEqual(filter_day_window([], datetime(2025, 3, 10), UTC_MINUS_4), [])


if __name__ == "__main__":
    unittest.main()
