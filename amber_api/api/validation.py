"""Client-side checks of the API's documented request limits.

These run before any request is dispatched. The server remains the final
authority and answers 422 when its own limits are broken.
"""
from datetime import date, datetime, timedelta

from amber_api.api.errors import InvalidRange, InvalidResolution, LimitExceeded, ValidationError
from amber_api.models.types import Resolution, State

MAX_DATE_SPAN = timedelta(days=7)
MAX_INTERVAL_COUNT = 2048


def validate_date_range(start: date, end: date) -> None:
    """Both bounds are inclusive, so start == end asks for a single day.

    Datetimes are compared by calendar day; the time of day is ignored.
    """
    if isinstance(start, datetime):
        start = start.date()
    if isinstance(end, datetime):
        end = end.date()
    if end < start:
        raise InvalidRange(start, end, "endDate is before startDate")
    if end - start > MAX_DATE_SPAN:
        raise InvalidRange(start, end, f"span of {(end - start).days} days exceeds {MAX_DATE_SPAN.days}")


def validate_interval_count(next_count: int | None, previous_count: int | None) -> None:
    nxt = next_count or 0
    prev = previous_count or 0
    if nxt < 0 or prev < 0 or nxt + prev > MAX_INTERVAL_COUNT:
        raise LimitExceeded(next_count, previous_count, MAX_INTERVAL_COUNT)


def validate_resolution(value: int | None) -> Resolution | None:
    """None defers to the site's billing interval length."""
    if value is None:
        return None
    # bool is an int subclass; True must not pass as a resolution
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidResolution(value)
    try:
        return Resolution(value)
    except ValueError:
        raise InvalidResolution(value) from None


def validate_state(value: State | str) -> State:
    if isinstance(value, State):
        return value
    try:
        return State(str(value).lower())
    except ValueError:
        allowed = ", ".join(s.value for s in State)
        raise ValidationError(f"unknown state {value!r} (expected one of {allowed})") from None
