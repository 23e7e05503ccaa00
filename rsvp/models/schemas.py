"""
Asado RSVP -- Pydantic Data Models

The attendee record is the only entity in the system. It is stored on disk,
returned by GET /attendees and pushed over the live feed in exactly this
shape, so the model doubles as the persisted layout and the wire format.

RegistrationRequest is what the page POSTs. It is deliberately loose
(both fields optional, null allowed) because "missing name" has to be
reported separately from "not a valid payload".
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_timestamp() -> str:
    """Current instant as ISO 8601 UTC with milliseconds, e.g. 2026-10-19T20:15:03.123Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def ensure_utf8(value: str) -> str:
    """Reject strings that cannot be written out as UTF-8 (lone surrogates
    decoded from \\ud800-style JSON escapes)."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValueError("text is not valid unicode") from e
    return value


# ---------------------------------------------------------------------------
# Attendee record
# ---------------------------------------------------------------------------

class Attendee(BaseModel):
    """One registrant. Immutable once created -- there is no update or delete."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        min_length=1,
        description="Registrant name, trimmed and never empty.",
        examples=["Ana"],
    )
    comment: str = Field(
        default="",
        description="Optional comment, trimmed. Empty string when not given.",
        examples=["llevo ensalada"],
    )
    timestamp: str = Field(
        default_factory=utc_timestamp,
        description="Creation instant assigned by the store (ISO 8601, UTC).",
        examples=["2026-10-19T20:15:03.123Z"],
    )

    @field_validator("name", "comment", mode="before")
    @classmethod
    def _strip(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("name", "comment", "timestamp")
    @classmethod
    def _utf8(cls, value: str) -> str:
        return ensure_utf8(value)


# ---------------------------------------------------------------------------
# POST /attendees
# ---------------------------------------------------------------------------

class RegistrationRequest(BaseModel):
    """Body of a registration. Non-string values make the payload invalid;
    a blank or absent name is a separate (validation) error."""

    model_config = ConfigDict(strict=True)

    name: str | None = Field(default=None, examples=["Ana"])
    comment: str | None = Field(default=None, examples=["llevo ensalada"])

    @field_validator("name", "comment")
    @classmethod
    def _utf8(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return ensure_utf8(value)

    @property
    def clean_name(self) -> str:
        return (self.name or "").strip()

    @property
    def clean_comment(self) -> str:
        return (self.comment or "").strip()


class RegistrationResponse(BaseModel):
    success: bool = Field(default=True, examples=[True])


class ErrorResponse(BaseModel):
    error: str = Field(description="Short machine-friendly reason.", examples=["name required"])
