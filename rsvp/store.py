"""
Attendee store.

Owns the ordered list of attendee records. The in-memory list is always the
source of truth for reads; the file-backed store additionally rewrites the
whole list to a JSON file after every append. That write is best effort --
on a read-only filesystem the record still shows up for as long as the
process lives.

Every append also publishes a full-list snapshot to live subscribers (the
change feed behind GET /attendees/stream).
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import AsyncIterator, Iterable

from pydantic import ValidationError

from rsvp.config import Settings
from rsvp.errors import NameRequiredError
from rsvp.models.schemas import Attendee

logger = logging.getLogger(__name__)


class AttendeeStore(ABC):
    """Append-only list of attendees with a change feed."""

    storage = "abstract"

    def __init__(self, attendees: Iterable[Attendee] = ()):
        self._attendees: list[Attendee] = list(attendees)
        self._lock = threading.Lock()
        # (loop, queue) per live subscriber
        self._subscribers: list[tuple[asyncio.AbstractEventLoop, asyncio.Queue]] = []

    def __len__(self) -> int:
        return len(self._attendees)

    def list(self) -> list[Attendee]:
        """All records in insertion order."""
        with self._lock:
            return list(self._attendees)

    def append(self, name: str | None, comment: str | None = "") -> Attendee:
        """Register one attendee. Raises NameRequiredError on a blank name."""
        name = (name or "").strip()
        if not name:
            raise NameRequiredError()

        record = Attendee(name=name, comment=(comment or "").strip())

        with self._lock:
            self._attendees.append(record)
            snapshot = list(self._attendees)
            self._persist(snapshot)
            self._publish(snapshot)

        logger.info("Registered %r (%d attendees)", record.name, len(snapshot))
        return record

    async def subscribe(self) -> AsyncIterator[list[Attendee]]:
        """Yield the current list, then the full list again after every append.

        Runs until the consumer stops iterating.
        """
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()
        subscriber = (loop, queue)

        with self._lock:
            self._subscribers.append(subscriber)
            queue.put_nowait(list(self._attendees))
        logger.debug("Subscriber connected (%d live)", len(self._subscribers))

        try:
            while True:
                yield await queue.get()
        finally:
            with self._lock:
                if subscriber in self._subscribers:
                    self._subscribers.remove(subscriber)
            logger.debug("Subscriber disconnected (%d live)", len(self._subscribers))

    def _publish(self, snapshot: list[Attendee]) -> None:
        # Caller holds the lock.
        for subscriber in list(self._subscribers):
            loop, queue = subscriber
            if loop.is_closed():
                self._subscribers.remove(subscriber)
                continue
            loop.call_soon_threadsafe(queue.put_nowait, snapshot)

    @abstractmethod
    def _persist(self, snapshot: list[Attendee]) -> None:
        """Write the full list to durable storage. Must not raise."""


class InMemoryAttendeeStore(AttendeeStore):
    """No persistence. Data is lost on restart."""

    storage = "memory"

    def _persist(self, snapshot: list[Attendee]) -> None:
        pass


class JsonFileAttendeeStore(AttendeeStore):
    """Attendees kept in memory and mirrored to a pretty-printed JSON array."""

    storage = "file"

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(load_attendees(self.path))
        logger.info("Loaded %d attendees from %s", len(self), self.path)

    def _persist(self, snapshot: list[Attendee]) -> None:
        try:
            save_attendees(self.path, snapshot)
        except (OSError, ValueError) as e:
            # ValueError covers text the encoder refuses
            logger.error(
                "Could not write %s, keeping %d attendees in memory only: %s",
                self.path, len(snapshot), e,
            )


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------

def load_attendees(path: Path) -> list[Attendee]:
    """Read the data file. Anything unreadable means an empty list."""
    if not path.exists():
        return []

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Error reading attendees file %s: %s", path, e)
        return []

    if not isinstance(data, list):
        logger.error("Attendees file %s does not contain a JSON array", path)
        return []

    attendees = []
    for index, entry in enumerate(data):
        # The creation time is never invented on load
        if not isinstance(entry, dict) or "timestamp" not in entry:
            logger.warning("Skipping attendee entry #%d without timestamp in %s", index, path)
            continue
        try:
            attendees.append(Attendee.model_validate(entry))
        except ValidationError:
            logger.warning("Skipping invalid attendee entry #%d in %s", index, path)
    return attendees


def save_attendees(path: Path, attendees: Iterable[Attendee]) -> None:
    """
    Rewrite the data file with the full list.

    The list is written to a temporary file next to the data file and moved
    over it, so a failed write leaves the previous file untouched.

    Raises:
        OSError: If the directory or file is not writable
        ValueError: If the content cannot be encoded
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)
    payload = [a.model_dump() for a in attendees]

    temp_fd, temp_path = tempfile.mkstemp(dir=dir_path, prefix=".tmp_", suffix=".json")
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except BaseException:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise


def build_store(settings: Settings) -> AttendeeStore:
    if settings.storage == "memory":
        return InMemoryAttendeeStore()
    return JsonFileAttendeeStore(settings.data_file)
