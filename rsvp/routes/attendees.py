"""
/attendees -- list, register, and the live feed.

GET  /attendees         current list, insertion order
POST /attendees         register {name, comment}
GET  /attendees/stream  server-sent events; one full list per change

The body of a registration is read whole and parsed by hand instead of
being bound to a model by FastAPI, so that an unparseable body ("invalid
payload") and a blank name ("name required") come back as two different
400s rather than a generic 422.
"""

import json
import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from rsvp.errors import InvalidPayloadError
from rsvp.models.schemas import Attendee, ErrorResponse, RegistrationRequest, RegistrationResponse
from rsvp.store import AttendeeStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> AttendeeStore:
    """The store owned by the running application."""
    return request.app.state.store


async def read_registration(request: Request) -> RegistrationRequest:
    body = await request.body()
    try:
        data = json.loads(body)
        if not isinstance(data, dict):
            raise InvalidPayloadError()
        return RegistrationRequest.model_validate(data)
    except (ValueError, ValidationError) as e:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
        logger.info("Rejected registration body: %s", e)
        raise InvalidPayloadError() from e


@router.get(
    "/attendees",
    response_model=list[Attendee],
    summary="List attendees",
    tags=["Attendees"],
)
async def list_attendees(store: AttendeeStore = Depends(get_store)) -> list[Attendee]:
    return store.list()


@router.post(
    "/attendees",
    response_model=RegistrationResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Register an attendee",
    tags=["Attendees"],
)
async def register_attendee(request: Request, store: AttendeeStore = Depends(get_store)) -> RegistrationResponse:
    registration = await read_registration(request)
    store.append(registration.clean_name, registration.clean_comment)
    return RegistrationResponse(success=True)


async def _event_stream(store: AttendeeStore) -> AsyncIterator[str]:
    async for snapshot in store.subscribe():
        payload = json.dumps([a.model_dump() for a in snapshot], ensure_ascii=False)
        yield f"data: {payload}\n\n"


@router.get(
    "/attendees/stream",
    summary="Live attendee list (server-sent events)",
    tags=["Attendees"],
)
async def stream_attendees(store: AttendeeStore = Depends(get_store)) -> StreamingResponse:
    return StreamingResponse(
        _event_stream(store),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
