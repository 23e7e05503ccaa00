"""Exceptions raised by the store and the HTTP layer.

Each error carries the status code and the short message the API returns
as {"error": message}. Persistence problems are plain OSErrors and never
leave the store.
"""


class RSVPError(Exception):
    """Base class for errors reported back to the submitter."""

    status_code = 400
    message = "bad request"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class NameRequiredError(RSVPError):
    """The name trims to an empty string."""

    message = "name required"


class InvalidPayloadError(RSVPError):
    """The registration body is not a JSON object with string fields."""

    message = "invalid payload"
