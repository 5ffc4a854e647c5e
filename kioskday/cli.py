"""
CLI (Command Line Interface).

This module provides quick terminal commands for checking the dashboard
data without the display, e.g.:

    kioskday images <export.html> [--day Friday]
    kioskday events <events.json> [--now ISO] [--tz Europe/Zurich]
    kioskday sync [--watch]

Note:
- images / events work on files saved beforehand (no network)
- sync fetches with the stored access token, see settings.py
- output is plain text (no rich formatting)
"""

from __future__ import annotations

import argparse
import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from dateutil import parser as dateutil_parser

from kioskday.arbiter import ResultArbiter
from kioskday.associate import extract_day_images
from kioskday.day_window import filter_day_window
from kioskday.event_time import normalize_api_events, resolve_timezone
from kioskday.google_api import GoogleAPIError
from kioskday.model import WEEKDAYS, DayImageMap, NormalizationResult
from kioskday.refresh import refresh_day_images, refresh_today_events, run_periodic
from kioskday.settings import load_access_token, load_settings


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def _load_event_items(path: Path) -> Optional[list[Any]]:
    """
    Load Calendar API items from a JSON dump.

    Accepts either the raw API response ({"items": [...]}) or a bare list.
    Returns None if the file is missing or not valid JSON.
    """
    text = _read_text(path)
    if text is None:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    if isinstance(data, dict):
        data = data.get("items", [])
    return list(data) if isinstance(data, list) else None


def _parse_now(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return dateutil_parser.isoparse(value)


def _print_day_images(mapping: DayImageMap) -> None:
    if not mapping:
        print("No schedule found.")
        return
    for day in WEEKDAYS:
        if day in mapping:
            print(f"{day:<9} | {mapping[day]}")


def _print_events(result: NormalizationResult) -> None:
    if not result.events:
        print("No events today.")
    for ev in result.events:
        d = ev.to_dict()
        when = "all day" if ev.is_all_day else f"{d['start'][11:16]}-{d['end'][11:16]}"
        print(f"{when:<11} | {ev.title}")
    if result.dropped:
        print(f"Dropped {len(result.dropped)} event(s) with unreadable times.")


def _cmd_images(args: argparse.Namespace) -> int:
    """
    Print the weekday -> image mapping of an exported HTML document.
    """
    html = _read_text(Path(args.file))
    if html is None:
        print(f"Cannot read file: {args.file}")
        return 1

    mapping = extract_day_images(html)

    if args.day:
        day = args.day.strip().capitalize()
        if day not in WEEKDAYS:
            print(f"Unknown weekday: {args.day}")
            return 1
        src = mapping.get(day)
        if not src:
            print(f"No image found for {day}")
            return 0
        print(src)
        return 0

    _print_day_images(mapping)
    return 0


def _cmd_events(args: argparse.Namespace) -> int:
    """
    Normalize a Calendar API JSON dump and print today's events.
    """
    items = _load_event_items(Path(args.file))
    if items is None:
        print(f"Cannot read events from: {args.file}")
        return 1

    try:
        zone = resolve_timezone(args.tz)
        now = _parse_now(args.now)
    except ValueError as err:
        print(str(err))
        return 1

    result = normalize_api_events(items, zone)
    visible = NormalizationResult(
        events=filter_day_window(result.events, now, zone),
        dropped=result.dropped,
    )
    _print_events(visible)
    return 0


def _cmd_sync(args: argparse.Namespace) -> int:
    """
    Fetch the schedule document and today's events with the stored token.
    """
    settings = load_settings(args.settings)
    token = load_access_token(settings.resolved_token_path())
    if not token:
        print("Please sign in first (no access token found).")
        return 1

    images: ResultArbiter[DayImageMap] = ResultArbiter()
    events: ResultArbiter[NormalizationResult] = ResultArbiter()

    def job() -> None:
        refresh_day_images(token, settings, images)
        refresh_today_events(token, settings, events)
        _print_day_images(images.latest or {})
        print()
        _print_events(events.latest or NormalizationResult())

    try:
        if args.watch:
            stop = threading.Event()
            try:
                run_periodic(job, settings.refresh_seconds, stop)
            except KeyboardInterrupt:
                stop.set()
            return 0
        job()
    except GoogleAPIError as err:
        print(f"Error: {err}")
        return 1
    except ValueError as err:
        print(f"Configuration error: {err}")
        return 1

    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="kioskday", description="Kiosk dashboard data CLI")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log details to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    p_images = sub.add_parser("images", help="Map weekdays to images from an exported HTML document")
    p_images.add_argument("file", type=str, help="Exported HTML file")
    p_images.add_argument("--day", type=str, default=None, help="Only print the image of this weekday")

    p_events = sub.add_parser("events", help="Show today's events from a Calendar API JSON dump")
    p_events.add_argument("file", type=str, help="JSON file ({'items': [...]} or a list)")
    p_events.add_argument("--now", type=str, default=None, help="Reference instant (ISO 8601), default: now")
    p_events.add_argument("--tz", type=str, default=None, help="Local timezone name, default: system zone")

    p_sync = sub.add_parser("sync", help="Fetch document and events with the stored token")
    p_sync.add_argument("--settings", type=str, default=None, help="Settings JSON file")
    p_sync.add_argument("--watch", action="store_true", help="Keep refreshing every refresh_seconds")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    Run one kioskday subcommand (images, events or sync).

    --verbose turns on debug logging first. Always ends with SystemExit
    carrying the subcommand's status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "images":
        raise SystemExit(_cmd_images(args))
    if args.command == "events":
        raise SystemExit(_cmd_events(args))
    if args.command == "sync":
        raise SystemExit(_cmd_sync(args))

    raise SystemExit(2)
