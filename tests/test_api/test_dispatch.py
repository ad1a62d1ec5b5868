"""Tests for request building and transport error wrapping."""

from datetime import date, datetime

import httpx
import pytest

from amber_api.api.dispatch import Dispatcher, serialize_params
from amber_api.api.errors import TransportError, Unauthorized
from amber_api.core.config import ConfigBuilder
from amber_api.models.types import Resolution, State


def _dispatcher(handler, api_key="key-123"):
    config = ConfigBuilder().api_key(api_key).base_url("https://amber.test/v1").build()
    return Dispatcher(config, transport=httpx.MockTransport(handler))


def test_serialize_params():
    params = {
        "startDate": date(2021, 5, 5),
        "next": 12,
        "previous": None,
        "resolution": Resolution.THIRTY_MINUTE,
        "state": State.VIC,
    }
    assert serialize_params(params) == {
        "startDate": "2021-05-05",
        "next": "12",
        "resolution": "30",
        "state": "vic",
    }


def test_serialize_params_sends_datetimes_as_calendar_days():
    params = {"startDate": datetime(2021, 5, 5, 13, 0), "endDate": datetime(2021, 5, 6, 23, 59)}
    assert serialize_params(params) == {"startDate": "2021-05-05", "endDate": "2021-05-06"}


@pytest.mark.asyncio
async def test_authenticated_get_sends_bearer_and_query():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=b"[]", headers={"RateLimit-Remaining": "7"})

    dispatcher = _dispatcher(handler)
    raw = await dispatcher.get("/sites/abc/prices", {"startDate": date(2021, 5, 5), "endDate": None})
    await dispatcher.close()

    (request,) = seen
    assert request.method == "GET"
    assert request.url.path == "/v1/sites/abc/prices"
    assert dict(request.url.params) == {"startDate": "2021-05-05"}
    assert request.headers["Authorization"] == "Bearer key-123"
    assert raw.status_code == 200
    assert raw.body == b"[]"
    assert raw.headers["RateLimit-Remaining"] == "7"


@pytest.mark.asyncio
async def test_public_get_omits_authorization():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=b"[]")

    dispatcher = _dispatcher(handler)
    await dispatcher.get("/state/vic/renewables/current", authenticated=False)
    await dispatcher.close()

    assert "Authorization" not in seen[0].headers


@pytest.mark.asyncio
async def test_status_is_not_interpreted():
    dispatcher = _dispatcher(lambda request: httpx.Response(500, content=b"boom"))
    raw = await dispatcher.get("/sites")
    await dispatcher.close()
    assert raw.status_code == 500
    assert raw.body == b"boom"


@pytest.mark.asyncio
async def test_missing_api_key_fails_before_round_trip():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=b"[]")

    dispatcher = _dispatcher(handler, api_key=None)
    with pytest.raises(Unauthorized, match="AMBER_API_KEY"):
        await dispatcher.get("/sites")
    await dispatcher.close()
    assert seen == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exc",
    [
        httpx.ConnectError("connection refused"),
        httpx.ReadTimeout("timed out"),
        httpx.RemoteProtocolError("peer closed"),
    ],
)
async def test_transport_failures_are_wrapped(exc):
    calls = []

    def handler(request):
        calls.append(request)
        raise exc

    dispatcher = _dispatcher(handler)
    with pytest.raises(TransportError) as info:
        await dispatcher.get("/sites")
    await dispatcher.close()

    assert info.value.__cause__ is exc
    assert info.value.method == "GET"
    assert info.value.url == "https://amber.test/v1/sites"
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_undecodable_body_is_wrapped():
    def handler(request):
        return httpx.Response(
            200,
            headers={"Content-Encoding": "gzip"},
            stream=httpx.ByteStream(b"not gzip at all"),
        )

    dispatcher = _dispatcher(handler)
    with pytest.raises(TransportError) as info:
        await dispatcher.get("/sites")
    await dispatcher.close()

    assert isinstance(info.value.__cause__, httpx.DecodingError)
    assert info.value.url == "https://amber.test/v1/sites"
