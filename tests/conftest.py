"""Shared fixtures: JSON payloads as the API sends them and a client backed by httpx.MockTransport."""

import copy
import json

import httpx
import pytest

from amber_api.api.amber import AmberClient
from amber_api.core.config import ConfigBuilder

TEST_BASE_URL = "https://amber.test/v1"
TEST_API_KEY = "psk_test_key"

BASE_INTERVAL = {
    "duration": 5,
    "spotPerKwh": 6.12,
    "perKwh": 24.33,
    "date": "2021-05-05",
    "nemTime": "2021-05-06T12:30:00+10:00",
    "startTime": "2021-05-05T02:00:01Z",
    "endTime": "2021-05-05T02:30:00Z",
    "renewables": 45,
    "channelType": "general",
    "tariffInformation": None,
    "spikeStatus": "none",
    "descriptor": "negative",
}

ACTUAL_INTERVAL = {"type": "ActualInterval", **BASE_INTERVAL}

CURRENT_INTERVAL = {
    "type": "CurrentInterval",
    **BASE_INTERVAL,
    "range": {"min": 0, "max": 0},
    "estimate": True,
    "advancedPrice": {"low": 1, "predicted": 3, "high": 10},
}

FORECAST_INTERVAL = {
    "type": "ForecastInterval",
    **BASE_INTERVAL,
    "range": {"min": 0, "max": 0},
    "advancedPrice": {"low": 1, "predicted": 3, "high": 10},
}

USAGE = {
    "type": "Usage",
    **BASE_INTERVAL,
    "channelIdentifier": "E1",
    "kwh": 0,
    "quality": "billable",
    "cost": 0,
}

BASE_RENEWABLE = {
    "duration": 5,
    "date": "2021-05-05",
    "nemTime": "2021-05-06T12:30:00+10:00",
    "startTime": "2021-05-05T02:00:01Z",
    "endTime": "2021-05-05T02:30:00Z",
    "renewables": 45,
    "descriptor": "best",
}

SITE = {
    "id": "01F5A5CRKMZ5BCX9P1S4V990AM",
    "nmi": "3052282872",
    "channels": [{"identifier": "E1", "type": "general", "tariff": "A100"}],
    "network": "Jemena",
    "status": "closed",
    "activeFrom": "2022-01-01",
    "closedOn": "2022-05-01",
    "intervalLength": 30,
}

RATE_LIMIT_HEADERS = {
    "RateLimit-Limit": "50",
    "RateLimit-Remaining": "49",
    "RateLimit-Reset": "300",
    "RateLimit-Policy": "50;w=300",
}


@pytest.fixture()
def payloads() -> dict:
    """Deep copies of the sample payloads, safe to mutate per test."""
    return copy.deepcopy({
        "actual": ACTUAL_INTERVAL,
        "current": CURRENT_INTERVAL,
        "forecast": FORECAST_INTERVAL,
        "usage": USAGE,
        "renewable": BASE_RENEWABLE,
        "site": SITE,
    })


def json_response(payload, status_code: int = 200, headers: dict | None = None) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(payload).encode(),
        headers={"Content-Type": "application/json", **(headers or {})},
    )


class RecordingHandler:
    """MockTransport handler that records requests and replays one canned response."""

    def __init__(self, response: httpx.Response | Exception):
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture()
def make_client():
    """Factory: make_client(response, api_key=..., validate=...) -> (client, handler)."""

    def _make(response, api_key: str | None = TEST_API_KEY, validate: bool = True):
        handler = RecordingHandler(response)
        config = ConfigBuilder().api_key(api_key).base_url(TEST_BASE_URL).build()
        client = AmberClient(config, validate=validate, transport=httpx.MockTransport(handler))
        return client, handler

    return _make


@pytest.fixture()
def respond():
    return json_response
