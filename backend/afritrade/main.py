"""
Command-line consumer for the African intra-regional trade pipeline.

Runs one load cycle and prints the KPIs the dashboard renders.

Usage:
  afritrade                          # previous calendar year, live API with fallback
  afritrade --year 2022 --limit 5
  afritrade --source synthetic --seed 42 --json
  afritrade --indicators NGA
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from afritrade.core.config import settings
from afritrade.schemas.schemas import DashboardSnapshot
from afritrade.services.aggregator import format_currency, format_percentage
from afritrade.services.data_manager import DashboardDataManager

logger = logging.getLogger("afritrade.main")


def configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="%(asctime)s | %(name)-20s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="African intra-regional trade statistics")
    parser.add_argument("--year", type=int, default=None,
                        help="Data year (default: previous calendar year)")
    parser.add_argument("--source", choices=["live", "synthetic"], default=None,
                        help="Trade data source (default: DATA_SOURCE setting)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for synthetic data")
    parser.add_argument("--limit", type=int, default=None,
                        help="Number of top routes")
    parser.add_argument("--indicators", type=str, default=None, metavar="ISO3",
                        help="Also print World Bank indicators for this country")
    parser.add_argument("--json", action="store_true",
                        help="Print the full snapshot as JSON")
    parser.add_argument("--log-level", type=str, default=None,
                        help="Logging level (default: LOG_LEVEL setting)")
    return parser


def render_summary(snapshot: DashboardSnapshot) -> str:
    stats = snapshot.stats
    lines = [f"Intra-African trade, {snapshot.year}"]
    if snapshot.using_fallback:
        lines.append(
            "WARNING: live trade data unavailable, showing demonstration data "
            "based on typical African trade patterns"
        )
    lines += [
        f"  Intra-African share : {format_percentage(stats.intra_regional_percentage)}",
        f"  Total value         : {format_currency(stats.total_intra_regional_value)}",
        f"  YoY growth          : {format_percentage(stats.growth_rate_percent, signed=True)}",
        f"  Active routes       : {len(stats.top_routes)}",
    ]
    if stats.top_routes:
        lines.append("  Top routes:")
        for i, route in enumerate(stats.top_routes, start=1):
            lines.append(f"    {i:>2}. {route.reporter} → {route.partner}  {route.formatted_value}")
    return "\n".join(lines)


async def _run(manager: DashboardDataManager, year: int, limit: Optional[int], indicators: Optional[str]):
    snapshot = await manager.load_year_data(year, limit)
    side = None
    if indicators:
        side = await manager.fetch_economic_indicators(indicators.upper(), year)
    return snapshot, side


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or settings.log_level)

    overrides = {}
    if args.source:
        overrides["data_source"] = args.source
    if args.seed is not None:
        overrides["synthetic_seed"] = args.seed
    run_settings = settings.model_copy(update=overrides) if overrides else settings

    manager = DashboardDataManager(run_settings)
    year = args.year or manager.current_data_year()

    try:
        snapshot, indicators = asyncio.run(_run(manager, year, args.limit, args.indicators))
    except ValueError as e:
        logger.error(str(e))
        return 2

    if args.json:
        print(snapshot.model_dump_json(indent=2))
    else:
        print(render_summary(snapshot))

    if args.indicators:
        if indicators is None:
            print(f"World Bank indicators for {args.indicators.upper()}: unavailable")
        else:
            print(f"World Bank indicators for {args.indicators.upper()} ({year}):")
            for code, indicator in indicators.items():
                print(f"  {code:<20} {indicator.value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
