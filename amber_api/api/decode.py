"""Response decoder — JSON bodies to typed models.

Interval and Renewable arrays are discriminated unions: every element carries
a ``type`` tag naming its variant. The tag is read first and looked up in a
per-union table; the rest of the object is then decoded against that
variant's fields only. An unknown tag raises ``UnknownVariant`` instead of
dropping the element, so callers notice when the API grows a new kind.

Closed enums (channel type, spike status, descriptors, status, quality,
tariff period/season) reject unknown tokens. ``duration`` is kept as a bare
int and is not checked against today's set of lengths.
"""
import json
import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, TypeVar

from amber_api.api.errors import DecodeError, MalformedResponse, UnknownVariant
from amber_api.models.types import (
    ActualInterval,
    ActualRenewable,
    AdvancedPrice,
    Channel,
    ChannelType,
    CurrentInterval,
    CurrentRenewable,
    ForecastInterval,
    ForecastRenewable,
    Interval,
    PriceDescriptor,
    Range,
    Renewable,
    RenewableDescriptor,
    Site,
    SiteStatus,
    SpikeStatus,
    TariffInformation,
    TariffPeriod,
    TariffSeason,
    Usage,
    UsageQuality,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)
M = TypeVar("M")

SITE_INTERVAL_LENGTHS = (5, 30)


class _Fields:
    """Typed access to one JSON object, with error paths."""

    def __init__(self, data: Any, path: str):
        if not isinstance(data, dict):
            raise MalformedResponse(f"expected an object, got {_json_type(data)}", path)
        self._data = data
        self.path = path

    def _at(self, key: str) -> str:
        return f"{self.path}.{key}"

    def _get(self, key: str, optional: bool) -> Any:
        value = self._data.get(key)
        if value is None and not optional:
            reason = "is null" if key in self._data else "is missing"
            raise DecodeError(f"required field {key!r} {reason}", self._at(key))
        return value

    def string(self, key: str, optional: bool = False) -> str | None:
        value = self._get(key, optional)
        if value is None:
            return None
        if not isinstance(value, str):
            raise DecodeError(f"expected a string, got {_json_type(value)}", self._at(key))
        return value

    def number(self, key: str) -> float:
        value = self._get(key, False)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DecodeError(f"expected a number, got {_json_type(value)}", self._at(key))
        return float(value)

    def integer(self, key: str, optional: bool = False) -> int | None:
        value = self._get(key, optional)
        if value is None:
            return None
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(f"expected an integer, got {value!r}", self._at(key))
        return value

    def boolean(self, key: str, optional: bool = False) -> bool | None:
        value = self._get(key, optional)
        if value is None:
            return None
        if not isinstance(value, bool):
            raise DecodeError(f"expected a boolean, got {_json_type(value)}", self._at(key))
        return value

    def enum(self, key: str, cls: type[E], optional: bool = False) -> E | None:
        value = self.string(key, optional)
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise DecodeError(f"unknown {cls.__name__} {value!r} (expected one of {allowed})", self._at(key)) from None

    def date(self, key: str, optional: bool = False) -> date | None:
        value = self.string(key, optional)
        if value is None:
            return None
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise DecodeError(f"invalid date {value!r}", self._at(key)) from None

    def timestamp(self, key: str) -> datetime:
        value = self.string(key)
        try:
            # fromisoformat only accepts a trailing Z from Python 3.11
            parsed = datetime.fromisoformat(value[:-1] + "+00:00" if value.endswith("Z") else value)
        except ValueError:
            raise DecodeError(f"invalid timestamp {value!r}", self._at(key)) from None
        if parsed.tzinfo is None:
            raise DecodeError(f"timestamp {value!r} has no UTC offset", self._at(key))
        return parsed

    def array(self, key: str) -> list:
        value = self._get(key, False)
        if not isinstance(value, list):
            raise MalformedResponse(f"expected an array, got {_json_type(value)}", self._at(key))
        return value

    def nested(self, key: str) -> "_Fields | None":
        value = self._get(key, True)
        if value is None:
            return None
        return _Fields(value, self._at(key))


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _reject_constant(name: str):
    raise ValueError(f"non-standard constant {name}")


def load_json(body: bytes | str) -> Any:
    try:
        return json.loads(body, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise DecodeError(f"invalid JSON: {e}") from e


def _array(value: Any) -> list:
    if not isinstance(value, list):
        raise MalformedResponse(f"expected an array, got {_json_type(value)}")
    return value


def _tag(f: _Fields) -> str:
    tag = f.string("type", optional=True)
    if tag is None:
        raise MalformedResponse("element has no 'type' discriminant", f"{f.path}.type")
    return tag


# ── Sites ─────────────────────────────────────────────


def _channel(f: _Fields) -> Channel:
    return Channel(
        identifier=f.string("identifier"),
        type=f.enum("type", ChannelType),
        tariff=f.string("tariff"),
    )


def _site(f: _Fields) -> Site:
    interval_length = f.integer("intervalLength")
    if interval_length not in SITE_INTERVAL_LENGTHS:
        raise DecodeError(f"intervalLength must be 5 or 30, got {interval_length}", f"{f.path}.intervalLength")
    channels = f.array("channels")
    return Site(
        id=f.string("id"),
        nmi=f.string("nmi"),
        network=f.string("network"),
        status=f.enum("status", SiteStatus),
        channels=tuple(_channel(_Fields(c, f"{f.path}.channels[{i}]")) for i, c in enumerate(channels)),
        interval_length=interval_length,
        active_from=f.date("activeFrom", optional=True),
        closed_on=f.date("closedOn", optional=True),
    )


# ── Intervals ─────────────────────────────────────────


def _tariff(f: _Fields | None) -> TariffInformation | None:
    if f is None:
        return None
    return TariffInformation(
        period=f.enum("period", TariffPeriod, optional=True),
        season=f.enum("season", TariffSeason, optional=True),
        block=f.integer("block", optional=True),
        demand_window=f.boolean("demandWindow", optional=True),
    )


def _range(f: _Fields | None) -> Range | None:
    if f is None:
        return None
    return Range(min=f.number("min"), max=f.number("max"))


def _advanced_price(f: _Fields | None) -> AdvancedPrice | None:
    if f is None:
        return None
    return AdvancedPrice(low=f.number("low"), predicted=f.number("predicted"), high=f.number("high"))


def _interval_fields(f: _Fields) -> dict:
    return dict(
        duration=f.integer("duration"),
        spot_per_kwh=f.number("spotPerKwh"),
        per_kwh=f.number("perKwh"),
        date=f.date("date"),
        nem_time=f.timestamp("nemTime"),
        start_time=f.timestamp("startTime"),
        end_time=f.timestamp("endTime"),
        renewables=f.number("renewables"),
        channel_type=f.enum("channelType", ChannelType),
        spike_status=f.enum("spikeStatus", SpikeStatus),
        descriptor=f.enum("descriptor", PriceDescriptor),
        tariff_information=_tariff(f.nested("tariffInformation")),
    )


def _actual_interval(f: _Fields) -> ActualInterval:
    return ActualInterval(**_interval_fields(f))


def _current_interval(f: _Fields) -> CurrentInterval:
    return CurrentInterval(
        **_interval_fields(f),
        estimate=f.boolean("estimate"),
        range=_range(f.nested("range")),
        advanced_price=_advanced_price(f.nested("advancedPrice")),
    )


def _forecast_interval(f: _Fields) -> ForecastInterval:
    return ForecastInterval(
        **_interval_fields(f),
        range=_range(f.nested("range")),
        advanced_price=_advanced_price(f.nested("advancedPrice")),
    )


INTERVAL_VARIANTS: dict[str, Callable[[_Fields], Interval]] = {
    "ActualInterval": _actual_interval,
    "CurrentInterval": _current_interval,
    "ForecastInterval": _forecast_interval,
}


def _usage(f: _Fields) -> Usage:
    tag = f.string("type", optional=True)
    if tag is not None and tag != "Usage":
        raise UnknownVariant(tag, "Usage", f"{f.path}.type")
    return Usage(
        **_interval_fields(f),
        channel_identifier=f.string("channelIdentifier"),
        kwh=f.number("kwh"),
        quality=f.enum("quality", UsageQuality),
        cost=f.number("cost"),
    )


# ── Renewables ────────────────────────────────────────


def _renewable_fields(f: _Fields) -> dict:
    return dict(
        duration=f.integer("duration"),
        date=f.date("date"),
        nem_time=f.timestamp("nemTime"),
        start_time=f.timestamp("startTime"),
        end_time=f.timestamp("endTime"),
        renewables=f.number("renewables"),
        descriptor=f.enum("descriptor", RenewableDescriptor),
    )


RENEWABLE_VARIANTS: dict[str, Callable[[_Fields], Renewable]] = {
    "ActualRenewable": lambda f: ActualRenewable(**_renewable_fields(f)),
    "CurrentRenewable": lambda f: CurrentRenewable(**_renewable_fields(f)),
    "ForecastRenewable": lambda f: ForecastRenewable(**_renewable_fields(f)),
}


def _variant(f: _Fields, table: dict[str, Callable[[_Fields], M]], union: str) -> M:
    tag = _tag(f)
    try:
        decode = table[tag]
    except KeyError:
        raise UnknownVariant(tag, union, f"{f.path}.type") from None
    return decode(f)


# ── Public entry points ───────────────────────────────


def decode_interval(data: Any, path: str = "$") -> Interval:
    return _variant(_Fields(data, path), INTERVAL_VARIANTS, "Interval")


def decode_renewable(data: Any, path: str = "$") -> Renewable:
    return _variant(_Fields(data, path), RENEWABLE_VARIANTS, "Renewable")


def decode_site(data: Any, path: str = "$") -> Site:
    return _site(_Fields(data, path))


def _decode_array(body: bytes | str, decode: Callable[[Any, str], M]) -> tuple[M, ...]:
    items = _array(load_json(body))
    decoded = tuple(decode(item, f"$[{i}]") for i, item in enumerate(items))
    logger.debug("Decoded %d %s records", len(decoded), decode.__name__.removeprefix("decode_"))
    return decoded


def decode_sites(body: bytes | str) -> tuple[Site, ...]:
    return _decode_array(body, decode_site)


def decode_intervals(body: bytes | str) -> tuple[Interval, ...]:
    """Server order (General, Controlled Load, Feed In) is kept as-is."""
    return _decode_array(body, decode_interval)


def decode_renewables(body: bytes | str) -> tuple[Renewable, ...]:
    return _decode_array(body, decode_renewable)


def decode_usage_record(data: Any, path: str = "$") -> Usage:
    return _usage(_Fields(data, path))


def decode_usage(body: bytes | str) -> tuple[Usage, ...]:
    return _decode_array(body, decode_usage_record)
