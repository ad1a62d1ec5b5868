"""Command line access to the Amber API — prints sites, prices, usage and renewables."""
import argparse
import asyncio
import logging
import sys
from datetime import date
from typing import Callable

from amber_api.api.amber import AmberClient
from amber_api.api.errors import AmberError
from amber_api.core.config import ConfigBuilder
from amber_api.core.logging import setup_logging
from amber_api.models.types import (
    ApiResponse,
    BaseInterval,
    BaseRenewable,
    CurrentInterval,
    RateLimitInfo,
    Site,
    Usage,
)

logger = logging.getLogger("amber_api")


def format_site(site: Site) -> str:
    channels = ", ".join(f"{c.identifier}:{c.type.value}" for c in site.channels)
    return (
        f"{site.id}  nmi={site.nmi}  {site.network}  {site.status.value}  "
        f"{site.interval_length}min  channels=[{channels}]"
    )


def format_interval(interval: BaseInterval) -> str:
    kind = type(interval).__name__.removesuffix("Interval")
    line = (
        f"{interval.start_time:%Y-%m-%d %H:%M}  {kind:<8} {interval.channel_type.value:<14} "
        f"{interval.per_kwh:8.2f}c/kWh  spot={interval.spot_per_kwh:6.2f}  "
        f"{interval.descriptor.value:<12} renewables={interval.renewables:.0f}%"
    )
    if interval.spike_status.value != "none":
        line += f"  spike={interval.spike_status.value}"
    if isinstance(interval, CurrentInterval) and interval.estimate:
        line += "  (estimate)"
    return line


def format_usage(usage: Usage) -> str:
    return (
        f"{usage.start_time:%Y-%m-%d %H:%M}  {usage.channel_identifier:<4} "
        f"{usage.kwh:8.3f}kWh  {usage.cost:8.2f}c  {usage.quality.value}"
    )


def format_renewable(renewable: BaseRenewable) -> str:
    kind = type(renewable).__name__.removesuffix("Renewable")
    return (
        f"{renewable.start_time:%Y-%m-%d %H:%M}  {kind:<8} "
        f"{renewable.renewables:5.1f}%  {renewable.descriptor.value}"
    )


def format_rate_limit(info: RateLimitInfo) -> str:
    def show(value):
        return "n/a" if value is None else value

    return f"rate limit: {show(info.remaining)}/{show(info.limit)} remaining, resets in {show(info.reset)}s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="amber-api", description=__doc__)
    parser.add_argument("--api-key", help="defaults to AMBER_API_KEY")
    parser.add_argument("--base-url", help="defaults to AMBER_BASE_URL or the production API")
    parser.add_argument("--log-level", help="defaults to AMBER_LOG_LEVEL or WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("sites", help="list sites linked to the account")

    prices = sub.add_parser("prices", help="prices between two dates")
    prices.add_argument("site_id")
    prices.add_argument("--start", type=date.fromisoformat)
    prices.add_argument("--end", type=date.fromisoformat)
    prices.add_argument("--resolution", type=int)

    current = sub.add_parser("current-prices", help="current, previous and forecast prices")
    current.add_argument("site_id")
    current.add_argument("--next", type=int)
    current.add_argument("--previous", type=int)
    current.add_argument("--resolution", type=int)

    usage = sub.add_parser("usage", help="metered usage between two dates")
    usage.add_argument("site_id")
    usage.add_argument("--start", type=date.fromisoformat, required=True)
    usage.add_argument("--end", type=date.fromisoformat, required=True)

    renewables = sub.add_parser("renewables", help="grid renewables for a state")
    renewables.add_argument("state", choices=["nsw", "vic", "qld", "sa"])
    renewables.add_argument("--next", type=int)
    renewables.add_argument("--previous", type=int)
    renewables.add_argument("--resolution", type=int)

    return parser


async def fetch(client: AmberClient, args: argparse.Namespace) -> tuple[ApiResponse, Callable]:
    if args.command == "sites":
        return await client.get_sites(), format_site
    if args.command == "prices":
        return await client.get_prices(args.site_id, args.start, args.end, args.resolution), format_interval
    if args.command == "current-prices":
        resp = await client.get_current_prices(args.site_id, args.next, args.previous, args.resolution)
        return resp, format_interval
    if args.command == "usage":
        return await client.get_usage(args.site_id, args.start, args.end), format_usage
    if args.command == "renewables":
        resp = await client.get_current_renewables(args.state, args.next, args.previous, args.resolution)
        return resp, format_renewable
    raise ValueError(f"unknown command {args.command!r}")


async def run(args: argparse.Namespace) -> int:
    try:
        builder = ConfigBuilder().from_env()
        if args.api_key:
            builder.api_key(args.api_key)
        if args.base_url:
            builder.base_url(args.base_url)
        async with AmberClient(builder.build()) as client:
            resp, fmt = await fetch(client, args)
    except AmberError as e:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    for record in resp:
        print(fmt(record))
    print(format_rate_limit(resp.rate_limit), file=sys.stderr)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
