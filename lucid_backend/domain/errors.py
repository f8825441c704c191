"""Domain error taxonomy surfaced by the service layer.

Route handlers translate these into HTTP responses:
ValidationError -> 400, NotFoundError -> 404, UpstreamFailure -> 500.
"""


class LucidError(Exception):
    """Base class for errors raised by the service layer."""


class ValidationError(LucidError):
    """A required identifier or field is missing or malformed."""


class NotFoundError(LucidError):
    """A referenced dream or embedding does not exist for this user."""


class UpstreamFailure(LucidError):
    """The LLM / embedding provider call failed."""
