"""
Google Drive / Calendar REST wrappers.

Thin functions around requests with bearer-token auth. They return decoded
JSON (or raw text for exports) and raise GoogleAPIError on any failure;
none of them interpret the data, see associate.py / event_time.py for that.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests


# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------

API_BASE_URL = "https://www.googleapis.com"
GOOGLE_DOC_MIME = "application/vnd.google-apps.document"

REQUEST_TIMEOUT = 30


class GoogleAPIError(RuntimeError):
    """
    Raised when a Google API request cannot be completed.
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


# ---------------------------------------------------------------------------
# Core request helper
# ---------------------------------------------------------------------------


def _request(token: Optional[str], endpoint: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
    if not token:
        raise GoogleAPIError("No access token found. Please authenticate first.")

    url = f"{API_BASE_URL}{endpoint}"
    try:
        resp = requests.get(
            url,
            params=params,
            headers={"Authorization": f"Bearer {token}"},
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as err:
        raise GoogleAPIError(f"Network error: unable to reach Google API ({err})") from err

    if not resp.ok:
        message = f"API request failed: {resp.reason} ({resp.status_code})"
        try:
            body = resp.json()
            api_message = body.get("error", {}).get("message") if isinstance(body, dict) else None
            if api_message:
                message = api_message
        except ValueError:
            pass
        raise GoogleAPIError(message, status=resp.status_code)

    return resp


def _get_json(token: Optional[str], endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    resp = _request(token, endpoint, params)
    try:
        data = resp.json()
    except ValueError as err:
        raise GoogleAPIError(f"Invalid JSON from {endpoint}") from err
    if not isinstance(data, dict):
        raise GoogleAPIError(f"Unexpected response from {endpoint}")
    return data


# ---------------------------------------------------------------------------
# Drive
# ---------------------------------------------------------------------------


def find_document_by_name(token: Optional[str], name: str) -> str:
    """
    Find a Google Doc by exact name in the Drive root and return its id.
    """
    escaped = name.replace("'", "\\'")
    query = (
        f"name='{escaped}' and 'root' in parents "
        f"and mimeType='{GOOGLE_DOC_MIME}' and trashed=false"
    )
    data = _get_json(
        token,
        "/drive/v3/files",
        {"q": query, "pageSize": 10, "fields": "files(id, name)"},
    )

    files = data.get("files") or []
    if files and files[0].get("id"):
        return str(files[0]["id"])
    raise GoogleAPIError(f'Document "{name}" not found in root directory')


def export_document_html(token: Optional[str], document_id: str) -> str:
    """
    Export a Google Doc as HTML text.
    """
    resp = _request(
        token,
        f"/drive/v3/files/{document_id}/export",
        {"mimeType": "text/html"},
    )
    return resp.text


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


def list_calendar_events(
    token: Optional[str],
    calendar_id: str = "primary",
    max_results: int = 10,
    time_min: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    List expanded (single) events ordered by start time.

    time_min is an RFC 3339 timestamp; events ending before it are skipped
    by the API.
    """
    params: Dict[str, Any] = {
        "maxResults": max_results,
        "singleEvents": "true",
        "orderBy": "startTime",
    }
    if time_min:
        params["timeMin"] = time_min

    data = _get_json(token, f"/calendar/v3/calendars/{quote(calendar_id, safe='')}/events", params)
    items = data.get("items") or []
    return [x for x in items if isinstance(x, dict)]


def list_calendars(token: Optional[str]) -> List[Dict[str, Any]]:
    data = _get_json(token, "/calendar/v3/users/me/calendarList")
    items = data.get("items") or []
    return [x for x in items if isinstance(x, dict)]
