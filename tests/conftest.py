import pytest
from fastapi.testclient import TestClient

from rsvp.main import create_app
from rsvp.store import JsonFileAttendeeStore


@pytest.fixture
def static_dir(tmp_path):
    """A small static root with one file per interesting content type."""
    root = tmp_path / "public"
    root.mkdir()
    (root / "index.html").write_text("<!DOCTYPE html><h1>Asado</h1>", encoding="utf-8")
    (root / "style.css").write_text("body { margin: 0; }", encoding="utf-8")
    (root / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (root / "notes.xyz").write_bytes(b"raw bytes")
    (root / "img").mkdir()
    return root


@pytest.fixture
def data_file(tmp_path):
    """Data file path in a directory that does not exist yet."""
    return tmp_path / "data" / "attendees.json"


@pytest.fixture
def store(data_file):
    """File-backed store on the temporary data file."""
    return JsonFileAttendeeStore(data_file)


@pytest.fixture
def client(store, static_dir):
    """TestClient for an app wired to the temporary store and static root."""
    return TestClient(create_app(store=store, static_dir=static_dir))
