"""Amber Electric API client — validate, dispatch, decode."""
import logging
from datetime import date
from typing import Callable, TypeVar
from urllib.parse import quote

import httpx

from amber_api.api.decode import decode_intervals, decode_renewables, decode_sites, decode_usage
from amber_api.api.dispatch import Dispatcher
from amber_api.api.errors import classify_status
from amber_api.api.ratelimit import extract_rate_limit
from amber_api.api.validation import (
    validate_date_range,
    validate_interval_count,
    validate_resolution,
    validate_state,
)
from amber_api.core.config import ClientConfig, config_from_env
from amber_api.models.types import (
    ApiResponse,
    Interval,
    Renewable,
    Site,
    State,
    Usage,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AmberClient:
    """Async client for the Amber Electric public API.

    Every call returns an ``ApiResponse`` holding the decoded records and the
    rate-limit snapshot, or raises an ``AmberError``. Nothing is retried.

        async with AmberClient(ConfigBuilder().from_env().build()) as amber:
            sites = await amber.get_sites()

    ``validate=False`` skips the client-side parameter checks and leaves the
    server's 422 answer as the only authority.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        validate: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config if config is not None else config_from_env()
        self._validate = validate
        self._dispatcher = Dispatcher(self._config, transport=transport)

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def _call(
        self,
        path: str,
        decode: Callable[[bytes], tuple[T, ...]],
        params: dict | None = None,
        authenticated: bool = True,
    ) -> ApiResponse[T]:
        raw = await self._dispatcher.get(path, params, authenticated=authenticated)
        rate_limit = extract_rate_limit(raw.headers)
        error = classify_status(raw.status_code, raw.body, rate_limit)
        if error is not None:
            raise error
        return ApiResponse(data=decode(raw.body), rate_limit=rate_limit)

    # ── Renewables ────────────────────────────────────────

    async def get_current_renewables(
        self,
        state: State | str,
        next: int | None = None,
        previous: int | None = None,
        resolution: int | None = None,
    ) -> ApiResponse[Renewable]:
        """Grid renewables percentage for a state. Public, no API key needed."""
        state = validate_state(state)
        if self._validate:
            validate_interval_count(next, previous)
            resolution = validate_resolution(resolution)
        return await self._call(
            f"/state/{state.value}/renewables/current",
            decode_renewables,
            params={"next": next, "previous": previous, "resolution": resolution},
            authenticated=False,
        )

    # ── Sites ─────────────────────────────────────────────

    async def get_sites(self) -> ApiResponse[Site]:
        return await self._call("/sites", decode_sites)

    # ── Prices ────────────────────────────────────────────

    async def get_prices(
        self,
        site_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
        resolution: int | None = None,
    ) -> ApiResponse[Interval]:
        """Prices between two dates (inclusive, at most 7 days apart).

        Either date may be omitted; the API then defaults it to today. The span
        check only applies when both are given.
        Intervals come back ordered General > Controlled Load > Feed In.
        """
        if self._validate:
            if start_date is not None and end_date is not None:
                validate_date_range(start_date, end_date)
            resolution = validate_resolution(resolution)
        return await self._call(
            f"/sites/{quote(site_id, safe='')}/prices",
            decode_intervals,
            params={"startDate": start_date, "endDate": end_date, "resolution": resolution},
        )

    async def get_current_prices(
        self,
        site_id: str,
        next: int | None = None,
        previous: int | None = None,
        resolution: int | None = None,
    ) -> ApiResponse[Interval]:
        """Current interval, plus ``previous`` actual and ``next`` forecast intervals."""
        if self._validate:
            validate_interval_count(next, previous)
            resolution = validate_resolution(resolution)
        return await self._call(
            f"/sites/{quote(site_id, safe='')}/prices/current",
            decode_intervals,
            params={"next": next, "previous": previous, "resolution": resolution},
        )

    # ── Usage ─────────────────────────────────────────────

    async def get_usage(self, site_id: str, start_date: date, end_date: date) -> ApiResponse[Usage]:
        """Metered usage between two dates (inclusive, at most 7 days apart)."""
        if self._validate:
            validate_date_range(start_date, end_date)
        return await self._call(
            f"/sites/{quote(site_id, safe='')}/usage",
            decode_usage,
            params={"startDate": start_date, "endDate": end_date},
        )

    async def close(self):
        await self._dispatcher.close()

    async def __aenter__(self) -> "AmberClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()
