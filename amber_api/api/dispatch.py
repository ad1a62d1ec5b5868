"""One authenticated GET per API call. Status codes are not interpreted here."""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

import httpx

from amber_api.api.errors import TransportError, Unauthorized
from amber_api.core.config import ClientConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    headers: httpx.Headers
    body: bytes


def serialize_params(params: dict) -> dict[str, str]:
    """Dates (and datetimes, by calendar day) as YYYY-MM-DD, enums by value, ints as-is.

    None values are dropped.
    """
    query = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, datetime):
            value = value.date()
        if isinstance(value, date):
            query[key] = value.isoformat()
        else:
            query[key] = str(value)
    return query


class Dispatcher:
    def __init__(self, config: ClientConfig, transport: httpx.AsyncBaseTransport | None = None):
        self._config = config
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            headers={"Accept": "application/json", "User-Agent": config.user_agent},
            timeout=config.timeout,
            transport=transport,
        )

    def _headers(self, authenticated: bool) -> dict[str, str]:
        if not authenticated:
            return {}
        if not self._config.api_key:
            raise Unauthorized(401, "no API key configured; set AMBER_API_KEY or pass api_key")
        return {"Authorization": f"Bearer {self._config.api_key}"}

    async def get(self, path: str, params: dict | None = None, authenticated: bool = True) -> RawResponse:
        headers = self._headers(authenticated)
        query = serialize_params(params or {})
        logger.debug("GET %s params=%s auth=%s", path, query, authenticated)
        try:
            resp = await self._http.get(path, params=query, headers=headers)
        except httpx.RequestError as e:
            logger.warning("GET %s failed: %s", path, e)
            raise TransportError("GET", f"{self._config.base_url}{path}", str(e) or type(e).__name__) from e

        logger.debug(
            "GET %s -> %d (rate limit remaining: %s)",
            path, resp.status_code, resp.headers.get("RateLimit-Remaining", "n/a"),
        )
        return RawResponse(status_code=resp.status_code, headers=resp.headers, body=resp.content)

    async def close(self):
        await self._http.aclose()
