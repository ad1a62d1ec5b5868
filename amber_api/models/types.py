from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum, IntEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class State(Enum):
    NSW = "nsw"
    VIC = "vic"
    QLD = "qld"
    SA = "sa"


class Resolution(IntEnum):
    FIVE_MINUTE = 5
    THIRTY_MINUTE = 30


class ChannelType(Enum):
    GENERAL = "general"
    CONTROLLED_LOAD = "controlledLoad"
    FEED_IN = "feedIn"


class SiteStatus(Enum):
    PENDING = "pending"
    ACTIVE = "active"
    CLOSED = "closed"


class SpikeStatus(Enum):
    NONE = "none"
    POTENTIAL = "potential"
    SPIKE = "spike"


class PriceDescriptor(Enum):
    """Amber's price descriptor — how the price compares to typical, cheapest first."""
    NEGATIVE = "negative"
    EXTREMELY_LOW = "extremelyLow"
    VERY_LOW = "veryLow"
    LOW = "low"
    NEUTRAL = "neutral"
    HIGH = "high"
    SPIKE = "spike"


class RenewableDescriptor(Enum):
    BEST = "best"
    GREAT = "great"
    OK = "ok"
    NOT_GREAT = "notGreat"
    WORST = "worst"


class TariffPeriod(Enum):
    OFF_PEAK = "offPeak"
    SHOULDER = "shoulder"
    SOLAR_SPONGE = "solarSponge"
    PEAK = "peak"


class TariffSeason(Enum):
    DEFAULT = "default"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"
    SPRING = "spring"
    NON_SUMMER = "nonSummer"
    HOLIDAY = "holiday"
    WEEKEND = "weekend"
    WEEKEND_HOLIDAY = "weekendHoliday"
    WEEKDAY = "weekday"


class UsageQuality(Enum):
    ESTIMATED = "estimated"
    BILLABLE = "billable"


# ── Sites ─────────────────────────────────────────────


@dataclass(frozen=True)
class Channel:
    identifier: str               # E1, B1
    type: ChannelType
    tariff: str                   # network tariff code, e.g. A100


@dataclass(frozen=True)
class Site:
    id: str
    nmi: str
    network: str
    status: SiteStatus
    channels: tuple[Channel, ...]
    interval_length: int          # billing interval, 5 or 30 minutes
    active_from: date | None = None
    closed_on: date | None = None

    @property
    def has_feed_in(self) -> bool:
        return any(c.type is ChannelType.FEED_IN for c in self.channels)

    @property
    def channel_ids(self) -> dict[ChannelType, str]:
        return {c.type: c.identifier for c in self.channels}


# ── Prices ────────────────────────────────────────────


@dataclass(frozen=True)
class TariffInformation:
    """Why a price applies. Each field is only present for matching tariff types."""
    period: TariffPeriod | None = None
    season: TariffSeason | None = None
    block: int | None = None
    demand_window: bool | None = None


@dataclass(frozen=True)
class Range:
    min: float
    max: float


@dataclass(frozen=True)
class AdvancedPrice:
    low: float
    predicted: float
    high: float


@dataclass(frozen=True)
class BaseInterval:
    duration: int                 # minutes; 5, 15 or 30 today
    spot_per_kwh: float           # wholesale spot only, c/kWh
    per_kwh: float                # c/kWh including all charges
    date: date                    # NEM-local date
    nem_time: datetime            # interval end in NEM time (UTC+10)
    start_time: datetime
    end_time: datetime
    renewables: float             # percent
    channel_type: ChannelType
    spike_status: SpikeStatus
    descriptor: PriceDescriptor
    tariff_information: TariffInformation | None

    @property
    def is_actual(self) -> bool:
        return isinstance(self, ActualInterval)

    @property
    def is_current(self) -> bool:
        return isinstance(self, CurrentInterval)

    @property
    def is_forecast(self) -> bool:
        return isinstance(self, ForecastInterval)


@dataclass(frozen=True)
class ActualInterval(BaseInterval):
    pass


@dataclass(frozen=True)
class CurrentInterval(BaseInterval):
    estimate: bool = False
    range: Range | None = None
    advanced_price: AdvancedPrice | None = None


@dataclass(frozen=True)
class ForecastInterval(BaseInterval):
    range: Range | None = None
    advanced_price: AdvancedPrice | None = None


Interval = ActualInterval | CurrentInterval | ForecastInterval


@dataclass(frozen=True)
class Usage(BaseInterval):
    channel_identifier: str = ""
    kwh: float = 0.0              # negative means generation exported
    quality: UsageQuality = UsageQuality.ESTIMATED
    cost: float = 0.0             # cents


# ── Renewables ────────────────────────────────────────


@dataclass(frozen=True)
class BaseRenewable:
    duration: int
    date: date
    nem_time: datetime
    start_time: datetime
    end_time: datetime
    renewables: float
    descriptor: RenewableDescriptor

    @property
    def is_actual(self) -> bool:
        return isinstance(self, ActualRenewable)

    @property
    def is_current(self) -> bool:
        return isinstance(self, CurrentRenewable)

    @property
    def is_forecast(self) -> bool:
        return isinstance(self, ForecastRenewable)


@dataclass(frozen=True)
class ActualRenewable(BaseRenewable):
    pass


@dataclass(frozen=True)
class CurrentRenewable(BaseRenewable):
    pass


@dataclass(frozen=True)
class ForecastRenewable(BaseRenewable):
    pass


Renewable = ActualRenewable | CurrentRenewable | ForecastRenewable


# ── Responses ─────────────────────────────────────────


@dataclass(frozen=True)
class RateLimitInfo:
    """Snapshot of the RateLimit-* headers. None means the header was not sent."""
    limit: int | None = None
    remaining: int | None = None
    reset: int | None = None      # seconds until the window resets
    policy: str | None = None


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    data: tuple[T, ...]
    rate_limit: RateLimitInfo

    def __iter__(self):
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)
