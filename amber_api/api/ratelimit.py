"""RateLimit-* response headers (draft-ietf-httpapi-ratelimit-headers)."""
from collections.abc import Mapping

from amber_api.models.types import RateLimitInfo

LIMIT_HEADER = "RateLimit-Limit"
REMAINING_HEADER = "RateLimit-Remaining"
RESET_HEADER = "RateLimit-Reset"
POLICY_HEADER = "RateLimit-Policy"


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is None:
        # plain dicts are case sensitive, httpx.Headers is not
        value = headers.get(name.lower())
    return value


def _int_header(headers: Mapping[str, str], name: str) -> int | None:
    value = _header(headers, name)
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def extract_rate_limit(headers: Mapping[str, str]) -> RateLimitInfo:
    """Best effort: missing or unparsable values are None, never 0."""
    return RateLimitInfo(
        limit=_int_header(headers, LIMIT_HEADER),
        remaining=_int_header(headers, REMAINING_HEADER),
        reset=_int_header(headers, RESET_HEADER),
        policy=_header(headers, POLICY_HEADER),
    )
