"""
Intra-regional trade statistics.

Provides:
  1. Totals and intra-regional share
  2. Top trade routes (unordered country pairs, summed across direction/commodity)
  3. Year-over-year growth between the two latest years present
  4. Currency formatting for display
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from afritrade.core import countries
from afritrade.schemas.schemas import AggregateStats, Route, TradeFlowRecord

logger = logging.getLogger("afritrade.aggregator")


# ═══════════════════════════════════════════════════════════════════
#  1. FORMATTING
# ═══════════════════════════════════════════════════════════════════

def format_currency(value: float) -> str:
    if value >= 1e9:
        return f"${value / 1e9:.1f}B"
    elif value >= 1e6:
        return f"${value / 1e6:.1f}M"
    elif value >= 1e3:
        return f"${value / 1e3:.1f}K"
    return f"${value:.0f}"


def format_percentage(value: Optional[float], decimals: int = 1, signed: bool = False) -> str:
    if value is None:
        return "--"
    sign = "+" if signed and value >= 0 else ""
    return f"{sign}{value:.{decimals}f}%"


# ═══════════════════════════════════════════════════════════════════
#  2. TOTALS
# ═══════════════════════════════════════════════════════════════════

def total_value(records: Sequence[TradeFlowRecord]) -> float:
    return sum(r.trade_value for r in records)


def total_intra_regional_value(records: Sequence[TradeFlowRecord]) -> float:
    return sum(r.trade_value for r in records if countries.is_african_country(r.partner_code))


# ═══════════════════════════════════════════════════════════════════
#  3. TOP ROUTES
# ═══════════════════════════════════════════════════════════════════

def top_routes(records: Sequence[TradeFlowRecord], limit: int = 10) -> List[Route]:
    """
    Sum trade value per unordered (reporter, partner) pair. The first record
    seen for a pair fixes its orientation; sort is stable so equal values keep
    first-occurrence order.
    """
    if limit <= 0:
        return []

    totals: Dict[frozenset, float] = {}
    oriented: Dict[frozenset, Tuple[str, str]] = {}
    for r in records:
        pair = frozenset((r.reporter_code, r.partner_code))
        if pair not in totals:
            totals[pair] = 0.0
            oriented[pair] = (r.reporter_code, r.partner_code)
        totals[pair] += r.trade_value

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)[:limit]

    routes: List[Route] = []
    for pair, value in ranked:
        reporter, partner = oriented[pair]
        routes.append(Route(
            route=f"{reporter}-{partner}",
            reporter_code=reporter,
            partner_code=partner,
            reporter=countries.country_name(reporter),
            partner=countries.country_name(partner),
            value=value,
            formatted_value=format_currency(value),
        ))
    return routes


# ═══════════════════════════════════════════════════════════════════
#  4. GROWTH
# ═══════════════════════════════════════════════════════════════════

def growth_rate(records: Sequence[TradeFlowRecord]) -> Tuple[float, Optional[Tuple[int, int]]]:
    """
    Growth of the latest year present over the second-latest, in percent.
    Returns (rate, (previous_year, current_year)); rate is 0 with fewer than
    two distinct years or a zero previous total.
    """
    by_year: Dict[int, float] = {}
    for r in records:
        if r.year is None:
            continue
        by_year[r.year] = by_year.get(r.year, 0.0) + r.trade_value

    years = sorted(by_year)
    if len(years) < 2:
        return 0.0, None

    previous_year, current_year = years[-2], years[-1]
    previous_total = by_year[previous_year]
    current_total = by_year[current_year]
    if current_year - previous_year > 1:
        logger.info(f"Growth rate compares non-adjacent years {previous_year} and {current_year}")

    if previous_total <= 0:
        return 0.0, (previous_year, current_year)
    return (current_total - previous_total) / previous_total * 100, (previous_year, current_year)


# ═══════════════════════════════════════════════════════════════════
#  5. SUMMARY
# ═══════════════════════════════════════════════════════════════════

def compute_stats(records: Sequence[TradeFlowRecord], limit: int = 10) -> AggregateStats:
    total = total_value(records)
    intra = total_intra_regional_value(records)
    percentage = (intra / total) * 100 if total > 0 else 0.0
    rate, years = growth_rate(records)

    return AggregateStats(
        total_intra_regional_value=intra,
        total_value=total,
        intra_regional_percentage=percentage,
        top_routes=top_routes(records, limit),
        growth_rate_percent=rate,
        growth_years=years,
    )
