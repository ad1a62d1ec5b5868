"""Error taxonomy for the Amber client.

Every failure a call can produce is one of the classes below. Validation
errors are raised before a request is sent; HTTP status errors after a
non-2xx answer; decode errors after a 2xx answer whose body could not be
turned into models. Catch ``AmberError`` to handle all of them in one place.
"""
import logging

from amber_api.models.types import RateLimitInfo

logger = logging.getLogger(__name__)

BODY_FRAGMENT_LIMIT = 512


class AmberError(Exception):
    """Base exception for all client errors."""


class ConfigError(AmberError):
    """Raised when the client configuration is invalid."""


# ── Client-side validation ────────────────────────────


class ValidationError(AmberError):
    """Raised before dispatch when request parameters break a documented limit."""


class InvalidRange(ValidationError):
    def __init__(self, start, end, reason: str):
        self.start = start
        self.end = end
        super().__init__(f"invalid date range startDate={start} endDate={end}: {reason}")


class LimitExceeded(ValidationError):
    def __init__(self, next_count: int | None, previous_count: int | None, limit: int):
        self.next = next_count
        self.previous = previous_count
        self.limit = limit
        super().__init__(
            f"next={next_count} + previous={previous_count} exceeds the limit of {limit} intervals"
        )


class InvalidResolution(ValidationError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"resolution must be 5 or 30 minutes, got {value!r}")


# ── Transport ─────────────────────────────────────────


class TransportError(AmberError):
    """Connection, timeout or TLS failure. The underlying httpx error is the __cause__."""

    def __init__(self, method: str, url: str, reason: str):
        self.method = method
        self.url = url
        super().__init__(f"{method} {url} failed: {reason}")


# ── HTTP status ───────────────────────────────────────


class HttpStatusError(AmberError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str = "", rate_limit: RateLimitInfo | None = None):
        self.status_code = status_code
        self.body = body
        self.rate_limit = rate_limit or RateLimitInfo()
        message = f"HTTP {status_code} {self.describe}"
        if body:
            message += f": {body}"
        super().__init__(message)

    describe = "error"


class BadRequest(HttpStatusError):
    describe = "bad request"


class Unauthorized(HttpStatusError):
    describe = "API key is missing or invalid"


class NotFound(HttpStatusError):
    describe = "not found"


class UnprocessableEntity(HttpStatusError):
    describe = "unprocessable entity"


class ServerError(HttpStatusError):
    describe = "server error"


class UnexpectedStatus(HttpStatusError):
    describe = "unexpected status"


# ── Decoding ──────────────────────────────────────────


class DecodeError(AmberError):
    """A 2xx body could not be decoded. ``path`` locates the offending value."""

    def __init__(self, message: str, path: str = "$"):
        self.path = path
        super().__init__(f"{message} at {path}")


class MalformedResponse(DecodeError):
    """The body parsed as JSON but does not have the expected envelope."""


class UnknownVariant(DecodeError):
    def __init__(self, tag: str, union: str, path: str = "$"):
        self.tag = tag
        self.union = union
        super().__init__(f"unknown {union} variant {tag!r}", path)


_STATUS_ERRORS: dict[int, type[HttpStatusError]] = {
    400: BadRequest,
    401: Unauthorized,
    404: NotFound,
    422: UnprocessableEntity,
}


def body_fragment(body: bytes) -> str:
    text = body.decode("utf-8", errors="replace").strip()
    if len(text) > BODY_FRAGMENT_LIMIT:
        return text[:BODY_FRAGMENT_LIMIT] + "…"
    return text


def classify_status(
    status_code: int, body: bytes = b"", rate_limit: RateLimitInfo | None = None
) -> HttpStatusError | None:
    """Map a response status to its error, or None for 2xx."""
    if 200 <= status_code < 300:
        return None
    if status_code in _STATUS_ERRORS:
        cls = _STATUS_ERRORS[status_code]
    elif 500 <= status_code < 600:
        cls = ServerError
    else:
        cls = UnexpectedStatus
    error = cls(status_code, body_fragment(body), rate_limit)
    logger.warning("Amber API returned %s", error)
    return error
