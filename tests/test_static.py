"""Tests for static file lookup and the GET fallback route."""

import pytest
from fastapi.testclient import TestClient

from rsvp.config import PROJECT_ROOT
from rsvp.main import create_app
from rsvp.static import DEFAULT_CONTENT_TYPE, content_type_for, read_static, resolve_path
from rsvp.store import InMemoryAttendeeStore


class TestContentTypes:
    """The fixed MIME table."""

    @pytest.mark.parametrize("filename, expected", [
        ("index.html", "text/html"),
        ("style.css", "text/css"),
        ("script.js", "application/javascript"),
        ("attendees.json", "application/json"),
        ("logo.png", "image/png"),
        ("photo.jpg", "image/jpeg"),
        ("photo.JPEG", "image/jpeg"),
        ("anim.gif", "image/gif"),
        ("icon.svg", "image/svg+xml"),
        ("clip.mp4", "video/mp4"),
    ])
    def test_known_extensions(self, filename, expected):
        """Known extensions map to their content type."""
        assert content_type_for(filename) == expected

    @pytest.mark.parametrize("filename", ["archive.zip", "README", "notes.xyz"])
    def test_unknown_extensions_are_binary(self, filename):
        """Anything else is application/octet-stream."""
        assert content_type_for(filename) == DEFAULT_CONTENT_TYPE


class TestReadStatic:
    """Resolving URL paths to files under the static root."""

    def test_root_maps_to_index(self, static_dir):
        """The root path serves index.html."""
        assert resolve_path(static_dir, "/") == static_dir / "index.html"
        assert resolve_path(static_dir, "") == static_dir / "index.html"

    def test_reads_bytes(self, static_dir):
        """The file content is returned byte for byte."""
        static_file = read_static(static_dir, "/logo.png")
        assert static_file.content == b"\x89PNG\r\n\x1a\n"
        assert static_file.content_type == "image/png"

    def test_missing_file(self, static_dir):
        """A missing file resolves to nothing."""
        assert read_static(static_dir, "/does-not-exist.png") is None

    def test_directory_is_not_served(self, static_dir):
        """Directories are not files."""
        assert read_static(static_dir, "/img") is None

    def test_path_outside_root(self, static_dir):
        """Paths escaping the root are not found."""
        (static_dir.parent / "secret.txt").write_text("nope", encoding="utf-8")
        assert read_static(static_dir, "/../secret.txt") is None


class TestStaticRoute:
    """GET on any other path."""

    def test_index_page(self, client, static_dir):
        """The page is served at "/" as HTML."""
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert resp.content == (static_dir / "index.html").read_bytes()

    def test_stylesheet(self, client):
        """CSS is served as text/css."""
        resp = client.get("/style.css")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/css")

    def test_unknown_extension(self, client):
        """Unknown extensions are served as binary."""
        resp = client.get("/notes.xyz")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == DEFAULT_CONTENT_TYPE
        assert resp.content == b"raw bytes"

    def test_missing_file_is_404(self, client):
        """A missing file is a plain-text 404."""
        resp = client.get("/does-not-exist.png")
        assert resp.status_code == 404
        assert resp.text == "not found"

    def test_directory_is_404(self, client):
        """A directory is a plain-text 404."""
        assert client.get("/img").status_code == 404


class TestBundledFrontend:
    """The page shipped in frontend/ is what the default app serves."""

    @pytest.fixture
    def default_client(self):
        """Client on the default static directory with an in-memory store."""
        return TestClient(create_app(store=InMemoryAttendeeStore()))

    def test_frontend_files_exist(self):
        """The page, stylesheet and script are all present."""
        for name in ("index.html", "script.js", "style.css"):
            assert (PROJECT_ROOT / "frontend" / name).is_file()

    def test_page_and_script(self, default_client):
        """The page and its script are served with the right types."""
        page = default_client.get("/")
        assert page.status_code == 200
        assert 'id="registrationForm"' in page.text
        assert 'id="attendeesList"' in page.text

        script = default_client.get("/script.js")
        assert script.status_code == 200
        assert script.headers["content-type"].startswith("application/javascript")
