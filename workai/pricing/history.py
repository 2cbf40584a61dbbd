from __future__ import annotations

import logging
from typing import Any, Iterable, Protocol, Sequence

from workai.pricing.band import PriceBand, round_half_up
from workai.pricing.rules import BandRules

logger = logging.getLogger(__name__)


class HistoricalEntry(Protocol):
    price: float
    scope_type: str
    ai_low: int
    ai_high: int


def _relative_width(entry: Any) -> float | None:
    try:
        price = float(entry.price)
        width = float(entry.ai_high) - float(entry.ai_low)
    except (AttributeError, TypeError, ValueError):
        return None
    if price <= 0:
        return None
    return width / price


def relative_widths(entries: Iterable[HistoricalEntry], rules: BandRules) -> list[float]:
    """Usable relative band widths; non-positive and outlier widths are dropped."""
    widths: list[float] = []
    for entry in entries:
        width = _relative_width(entry)
        if width is None or width <= 0 or width >= rules.history_max_relative_width:
            continue
        widths.append(width)
    return widths


def median(values: Sequence[float]) -> float:
    if not values:
        raise ValueError("median of empty sequence")
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def peer_width(scope_type: str, history: Sequence[HistoricalEntry], rules: BandRules) -> float | None:
    """Clamped median relative width of past bands for the same scope, if there is enough data."""
    peers = [entry for entry in history if getattr(entry, "scope_type", None) == scope_type]
    if len(peers) < rules.history_min_entries:
        return None
    widths = relative_widths(peers, rules)
    if len(widths) < rules.history_min_samples:
        logger.debug("history_tuning_skipped scope=%s samples=%s", scope_type, len(widths))
        return None
    return min(max(median(widths), rules.history_width_floor), rules.history_width_ceiling)


def tune_band(
    band: PriceBand,
    price: float,
    scope_type: str,
    history: Sequence[HistoricalEntry],
    rules: BandRules,
) -> tuple[PriceBand, bool]:
    """Re-center ``band`` on ``price`` using the peer width. Returns the band and whether it changed."""
    width = peer_width(scope_type, history, rules)
    if width is None:
        return band, False
    low = round_half_up(price * (1 - width / 2))
    high = round_half_up(price * (1 + width / 2))
    if low <= 0 or high <= low:
        return band, False
    return PriceBand(low=low, high=high), True
