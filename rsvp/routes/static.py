"""
GET /{path} -- the RSVP page and its assets.

Registered last so that it only sees paths no other route claimed.
"""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from rsvp.static import read_static

router = APIRouter()


def not_found() -> PlainTextResponse:
    return PlainTextResponse("not found", status_code=404)


@router.get("/{path:path}", include_in_schema=False)
async def serve_static(path: str, request: Request) -> Response:
    static_file = read_static(request.app.state.static_dir, path)
    if static_file is None:
        return not_found()
    return Response(content=static_file.content, media_type=static_file.content_type)
