"""
Asado RSVP -- Python client

Small client for the RSVP server, the scripted counterpart of the web page.

    from rsvp.client import RSVPClient, format_attendee

    rsvp = RSVPClient("http://localhost:3000")

    rsvp.register("Ana", "llevo ensalada")
    for attendee in rsvp.list_attendees():
        print(format_attendee(attendee))

    # Live list: one full snapshot per change, until you stop iterating
    for snapshot in rsvp.subscribe():
        print(len(snapshot), "attending")

Requirements: requests
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

import requests

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 10


# ── Result types ──────────────────────────────────────────────────────────


@dataclass
class AttendeeResult:
    """One entry of GET /attendees."""

    name: str
    comment: str
    timestamp: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttendeeResult":
        return cls(
            name=data["name"],
            comment=data.get("comment") or "",
            timestamp=data.get("timestamp", ""),
            raw=data,
        )


def format_attendee(attendee: AttendeeResult) -> str:
    """'name' or 'name: comment', the same line the page shows."""
    if attendee.comment:
        return f"{attendee.name}: {attendee.comment}"
    return attendee.name


# ── Exceptions ────────────────────────────────────────────────────────────


class RSVPError(Exception):
    """Base exception for client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RSVPValidationError(RSVPError):
    """Raised before any request when the name is blank."""


# ── Client ────────────────────────────────────────────────────────────────


class RSVPClient:
    """
    Client for the RSVP server.

    Args:
        base_url: Server URL. Defaults to http://localhost:3000.
        timeout: Request timeout in seconds. Defaults to 10.
        session: Optional requests-compatible session to send requests through.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        session: Any = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        kwargs.setdefault("timeout", self.timeout)
        resp = self._session.request(method, url, **kwargs)
        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = resp.text
            message = body.get("error") if isinstance(body, dict) else body
            raise RSVPError(
                f"API error {resp.status_code}: {message}",
                status_code=resp.status_code,
                body=body,
            )
        return resp.json()

    # ── Attendees ─────────────────────────────────────────────────────

    def list_attendees(self) -> List[AttendeeResult]:
        """Current attendee list, in registration order."""
        data = self._request("GET", "/attendees")
        return [AttendeeResult.from_dict(item) for item in data]

    def register(self, name: str, comment: str = "") -> bool:
        """
        Register an attendee.

        Args:
            name: Attendee name. Blank names are rejected locally.
            comment: Optional comment.

        Returns:
            True when the server accepted the registration.
        """
        name = (name or "").strip()
        comment = (comment or "").strip()
        if not name:
            raise RSVPValidationError("name required")

        data = self._request("POST", "/attendees", json={"name": name, "comment": comment})
        return bool(data.get("success"))

    # ── Live feed ─────────────────────────────────────────────────────

    def subscribe(self) -> Iterator[List[AttendeeResult]]:
        """
        Follow GET /attendees/stream.

        Yields the current list first, then the full list after every
        registration made by anyone. The stream never ends on its own.
        """
        url = f"{self.base_url}/attendees/stream"
        headers = {"Accept": "text/event-stream"}
        with self._session.get(url, headers=headers, stream=True, timeout=(self.timeout, None)) as resp:
            if resp.status_code >= 400:
                raise RSVPError(
                    f"API error {resp.status_code}: {resp.text}",
                    status_code=resp.status_code,
                    body=resp.text,
                )
            yield from parse_event_stream(resp.iter_lines(decode_unicode=True))


def parse_event_stream(lines: Iterable[str]) -> Iterator[List[AttendeeResult]]:
    """Turn server-sent event lines into attendee snapshots."""
    data: List[str] = []
    for line in lines:
        if line:
            if line.startswith("data:"):
                data.append(line[5:].lstrip())
            # comments, ids and event names carry nothing we need
            continue
        if data:
            yield [AttendeeResult.from_dict(item) for item in json.loads("\n".join(data))]
            data = []
