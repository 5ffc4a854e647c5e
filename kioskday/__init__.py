"""
kioskday: schedule data core for a kiosk status dashboard.
"""

from kioskday.associate import extract_day_images, image_for_day
from kioskday.day_window import filter_day_window
from kioskday.event_time import normalize_api_events, normalize_events

__all__ = [
    "extract_day_images",
    "image_for_day",
    "filter_day_window",
    "normalize_api_events",
    "normalize_events",
]
