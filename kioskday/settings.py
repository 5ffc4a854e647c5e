"""
Settings and access token loading.

This module reads (never writes):

    ~/.config/kioskday/settings.json   dashboard settings
    ~/.config/kioskday/token.json      {"access_token": "..."}

Environment variables override file values, so a kiosk can be configured
without any files at all.

Loading never fails: a missing or broken file yields the
defaults instead of crashing the dashboard.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional


DEFAULT_DOCUMENT_NAME = "small print Eye Candy Mic List - Fall 2025"


def _config_dir() -> Path:
    """
    Return the default config directory.

    Using a function instead of a constant makes testing easier,
    because tests can patch HOME.
    """
    return Path.home() / ".config" / "kioskday"


@dataclass(frozen=True)
class Settings:
    document_name: str = DEFAULT_DOCUMENT_NAME
    calendar_id: str = "primary"
    max_results: int = 50
    timezone: Optional[str] = None
    refresh_seconds: int = 60
    token_path: Optional[str] = None

    def resolved_token_path(self) -> Path:
        if self.token_path:
            return Path(self.token_path).expanduser()
        return _config_dir() / "token.json"


# env var -> (field, converter)
_ENV_OVERRIDES = {
    "KIOSKDAY_DOCUMENT_NAME": ("document_name", str),
    "KIOSKDAY_CALENDAR_ID": ("calendar_id", str),
    "KIOSKDAY_MAX_RESULTS": ("max_results", int),
    "KIOSKDAY_TIMEZONE": ("timezone", str),
    "KIOSKDAY_REFRESH_SECONDS": ("refresh_seconds", int),
    "KIOSKDAY_TOKEN_PATH": ("token_path", str),
}


def _read_json_object(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def _coerce(name: str, value: Any) -> Any:
    """
    Convert a file value to the type of the matching field.
    Raises ValueError / TypeError for unusable values.
    """
    if name in ("max_results", "refresh_seconds"):
        number = int(value)
        if number <= 0:
            raise ValueError(f"{name} must be positive")
        return number
    if value is None:
        return None
    return str(value).strip() or None


def load_settings(path: str | Path | None = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Load settings from a JSON file and the environment.

    Only known keys are merged over the defaults; invalid values are ignored.
    """
    settings_path = Path(path) if path is not None else _config_dir() / "settings.json"
    env = os.environ if environ is None else environ

    known = {f.name for f in fields(Settings)}
    values: dict[str, Any] = {}

    for key, value in _read_json_object(settings_path).items():
        if key not in known:
            continue
        try:
            values[key] = _coerce(key, value)
        except (TypeError, ValueError):
            continue

    for var, (key, convert) in _ENV_OVERRIDES.items():
        raw = env.get(var, "").strip()
        if not raw:
            continue
        try:
            values[key] = _coerce(key, convert(raw))
        except (TypeError, ValueError):
            continue

    # None from the file means "use the default" for required fields
    values = {k: v for k, v in values.items() if v is not None or k in ("timezone", "token_path")}
    return replace(Settings(), **values)


def load_access_token(path: str | Path | None = None, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Return the stored OAuth access token, or None if there is none.

    KIOSKDAY_ACCESS_TOKEN takes precedence over the token file.
    """
    env = os.environ if environ is None else environ
    from_env = env.get("KIOSKDAY_ACCESS_TOKEN", "").strip()
    if from_env:
        return from_env

    token_path = Path(path) if path is not None else _config_dir() / "token.json"
    token = _read_json_object(token_path).get("access_token")
    if isinstance(token, str) and token.strip():
        return token.strip()
    return None
