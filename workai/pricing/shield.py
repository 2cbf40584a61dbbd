from __future__ import annotations

from dataclasses import dataclass

from workai.pricing.band import PriceBand, round_half_up
from workai.pricing.notes import NOTE_AT_TOP_END, NOTE_PRICING_LEAN
from workai.pricing.rules import BandRules

SHIELD_TOP_END = "top_end"
SHIELD_UNDER_BAND = "under_band"


@dataclass(frozen=True)
class ShieldOutcome:
    band: PriceBand
    upsell_potential: int
    note_key: str
    triggered: str | None = None


def apply_stress_shield(
    band: PriceBand,
    price: float,
    upsell_potential: int,
    note_key: str,
    rules: BandRules,
) -> ShieldOutcome:
    """Final pass keeping the band from contradicting the price already charged.

    A price far above the band collapses the band around the price with no
    upsell. A price far below the floor raises upsell into the under-band
    range, which is capped at ``under_band_upsell_cap`` rather than the
    standard cap.
    """
    if price / band.high >= rules.shield_high_ratio:
        return ShieldOutcome(
            band=PriceBand.bounded(
                round_half_up(price * rules.shield_low_multiplier),
                round_half_up(price * rules.shield_high_multiplier),
            ),
            upsell_potential=0,
            note_key=NOTE_AT_TOP_END,
            triggered=SHIELD_TOP_END,
        )

    if price / band.low <= rules.shield_low_ratio:
        headroom = max(0.0, band.high - price)
        pct = round_half_up(headroom / price * 100)
        upsell = min(max(pct, rules.under_band_upsell_floor), rules.under_band_upsell_cap)
        return ShieldOutcome(
            band=band,
            upsell_potential=upsell,
            note_key=NOTE_PRICING_LEAN,
            triggered=SHIELD_UNDER_BAND,
        )

    return ShieldOutcome(band=band, upsell_potential=upsell_potential, note_key=note_key)
