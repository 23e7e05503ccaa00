"""
Asado RSVP -- Application entry point.

Run with:
    python -m rsvp
or
    uvicorn rsvp.main:app --port 3000 --timeout-graceful-shutdown 5

Then open http://localhost:3000 for the RSVP page.

Open /attendees/stream connections never end by themselves, so without a
graceful-shutdown timeout uvicorn would wait on them forever.

This file:
  1. Builds the FastAPI application around one attendee store
  2. Adds CORS middleware (permissive, the page may be hosted elsewhere)
  3. Maps RSVP errors to {"error": ...} and every unknown route to a 404
  4. Mounts the attendee routes, the health check and the static page
"""

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rsvp.config import SERVICE_NAME, VERSION, configure_logging, get_settings
from rsvp.errors import RSVPError
from rsvp.routes import attendees, static
from rsvp.store import AttendeeStore, build_store

logger = logging.getLogger(__name__)


def create_app(store: AttendeeStore | None = None, static_dir: str | Path | None = None) -> FastAPI:
    """Build the app. Anything not passed in comes from the environment."""
    settings = get_settings()

    app = FastAPI(
        title="Asado RSVP",
        version=VERSION,
        description=(
            "Collects a name and an optional comment for the asado and shows "
            "who is coming.\n\n"
            "| Endpoint | Purpose |\n"
            "|----------|--------|\n"
            "| `GET /attendees` | Current attendee list |\n"
            "| `POST /attendees` | Register `{name, comment}` |\n"
            "| `GET /attendees/stream` | Live list (server-sent events) |\n"
            "| `GET /health` | Health check |"
        ),
    )

    app.state.store = store if store is not None else build_store(settings)
    app.state.static_dir = Path(static_dir) if static_dir is not None else settings.static_dir

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Error mapping
    # -----------------------------------------------------------------------

    @app.exception_handler(RSVPError)
    async def rsvp_error_handler(request: Request, exc: RSVPError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Unknown path or method: plain 404, never a 405
        if exc.status_code in (404, 405):
            return static.not_found()
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    # -----------------------------------------------------------------------
    # Routes -- static last, it catches every remaining GET
    # -----------------------------------------------------------------------

    app.include_router(attendees.router)

    @app.get("/health", summary="Health check", tags=["System"])
    async def health():
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": VERSION,
            "attendees": len(app.state.store),
            "storage": app.state.store.storage,
        }

    app.include_router(static.router)

    return app


configure_logging(get_settings().log_level)
app = create_app()
