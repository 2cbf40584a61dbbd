from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Callable, Sequence

from workai.pricing.notes import (
    NOTE_EXTREME_HOURLY,
    NOTE_LARGE_TICKET,
    NOTE_TINY_JOB_CEILING,
    NOTE_WORKABLE_LANE,
)
from workai.pricing.rules import BandRules
from workai.pricing.signals import TextSignals


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive prices."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class PriceBand:
    low: int
    high: int

    def __post_init__(self) -> None:
        if self.low <= 0 or self.high < self.low:
            raise ValueError(f"invalid price band low={self.low} high={self.high}")

    @classmethod
    def bounded(cls, low: int, high: int) -> "PriceBand":
        """Band with low lifted to at least 1 and high lifted to at least low."""
        safe_low = max(1, low)
        return cls(low=safe_low, high=max(safe_low, high))


@dataclass(frozen=True)
class BandDraft:
    band: PriceBand
    upsell_potential: int
    note_key: str
    rules_fired: tuple[str, ...] = ()

    def fired(self, rule_name: str) -> bool:
        return rule_name in self.rules_fired


@dataclass(frozen=True)
class RuleContext:
    price: float
    signals: TextSignals
    rules: BandRules

    @property
    def implied_hourly_rate(self) -> float | None:
        hours = self.signals.approx_hours
        if hours is None or hours <= 0:
            return None
        return self.price / hours


BandRule = Callable[[BandDraft, RuleContext], "BandDraft | None"]

RULE_TINY_JOB_CEILING = "tiny_job_ceiling"
RULE_EXTREME_HOURLY = "extreme_hourly"
RULE_LARGE_TICKET = "large_ticket"


def base_band(ctx: RuleContext) -> BandDraft:
    r = ctx.rules
    price = ctx.price
    low = round_half_up(price * r.base_low_multiplier)
    high = round_half_up(price * r.base_high_multiplier)
    low = max(low, round_half_up(price * r.floor_multiplier))
    high = min(high, round_half_up(price * r.ceiling_multiplier))
    return BandDraft(
        band=PriceBand.bounded(low, high),
        upsell_potential=r.base_upsell,
        note_key=NOTE_WORKABLE_LANE,
    )


def tiny_job_at_ceiling(draft: BandDraft, ctx: RuleContext) -> BandDraft | None:
    r = ctx.rules
    hours = ctx.signals.approx_hours
    short_job = ctx.signals.tiny_job_signal or (hours is not None and hours <= r.tiny_job_max_hours)
    if not short_job or ctx.price < r.tiny_job_min_price:
        return None
    if draft.fired(RULE_EXTREME_HOURLY) and hours is not None and hours > r.tiny_job_max_hours:
        return None
    return BandDraft(
        band=PriceBand.bounded(
            round_half_up(ctx.price * r.tiny_job_low_multiplier),
            round_half_up(ctx.price * r.tiny_job_high_multiplier),
        ),
        upsell_potential=0,
        note_key=NOTE_TINY_JOB_CEILING,
        rules_fired=draft.rules_fired + (RULE_TINY_JOB_CEILING,),
    )


def extreme_hourly_rate(draft: BandDraft, ctx: RuleContext) -> BandDraft | None:
    r = ctx.rules
    hourly = ctx.implied_hourly_rate
    if hourly is None or hourly <= r.hourly_rate_limit:
        return None
    return BandDraft(
        band=PriceBand.bounded(
            round_half_up(ctx.price * r.hourly_low_multiplier),
            round_half_up(ctx.price * r.hourly_high_multiplier),
        ),
        upsell_potential=0,
        note_key=NOTE_EXTREME_HOURLY,
        rules_fired=draft.rules_fired + (RULE_EXTREME_HOURLY,),
    )


def large_ticket(draft: BandDraft, ctx: RuleContext) -> BandDraft | None:
    if ctx.price < ctx.rules.large_ticket_min_price or draft.fired(RULE_EXTREME_HOURLY):
        return None
    note_key = NOTE_LARGE_TICKET if draft.note_key == NOTE_WORKABLE_LANE else draft.note_key
    return replace(
        draft,
        upsell_potential=0,
        note_key=note_key,
        rules_fired=draft.rules_fired + (RULE_LARGE_TICKET,),
    )


# Order is precedence: a later rule that matches overrides every earlier one.
# Short jobs at high prices also trip the hourly rule; the ceiling rule runs
# after it so short jobs keep the ceiling band. A lexicon hit alone ("1 hr")
# does not displace the hourly band when the stated duration is longer.
OVERRIDE_RULES: tuple[BandRule, ...] = (
    extreme_hourly_rate,
    tiny_job_at_ceiling,
    large_ticket,
)


def apply_rules(draft: BandDraft, ctx: RuleContext, rules: Sequence[BandRule] = OVERRIDE_RULES) -> BandDraft:
    for rule in rules:
        updated = rule(draft, ctx)
        if updated is not None:
            draft = updated
    return draft


def synthesize_band(price: float, signals: TextSignals, rules: BandRules) -> BandDraft:
    """Provisional band, upsell and note for a positive price.

    Runs the base band, then the ordered override rules, then clamps upsell
    to the standard cap.
    """
    ctx = RuleContext(price=price, signals=signals, rules=rules)
    draft = apply_rules(base_band(ctx), ctx)
    capped = min(max(draft.upsell_potential, 0), rules.standard_upsell_cap)
    if capped != draft.upsell_potential:
        draft = replace(draft, upsell_potential=capped)
    return draft
