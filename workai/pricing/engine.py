from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence

from workai.pricing.band import synthesize_band
from workai.pricing.history import HistoricalEntry, tune_band
from workai.pricing.notes import NOTE_INSUFFICIENT_INPUT, NoteContext, deterministic_note
from workai.pricing.rules import DEFAULT_RULES, BandRules
from workai.pricing.shield import apply_stress_shield
from workai.pricing.signals import extract_signals
from workai.schemas.jobs import JobSubmission, RecommendationResult, normalize_scope_type

# Largest accepted price; band arithmetic overflows near the float limit.
MAX_PRICE = 1_000_000_000.0


@dataclass(frozen=True)
class EngineOutcome:
    result: RecommendationResult
    note_key: str
    rules_fired: tuple[str, ...] = ()
    history_tuned: bool = False
    shield: str | None = None

    def note_context(self) -> NoteContext:
        result = self.result
        return NoteContext(
            scope_type=result.scope_type,
            description=result.description,
            price=result.price,
            ai_low=result.ai_low,
            ai_high=result.ai_high,
            upsell_potential=result.upsell_potential,
            implied_hourly_rate=result.implied_hourly_rate,
        )


def parse_price(raw: Any) -> float:
    """Positive finite price up to ``MAX_PRICE`` from untrusted input, or 0.0 when there is none."""
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return 0.0
        try:
            value = float(text)
        except ValueError:
            return 0.0
    if not math.isfinite(value) or value <= 0 or value > MAX_PRICE:
        return 0.0
    return value


def evaluate(
    submission: JobSubmission,
    history: Sequence[HistoricalEntry] = (),
    rules: BandRules = DEFAULT_RULES,
) -> EngineOutcome:
    """Run the full band pipeline for one submission.

    Pure: the same submission, history snapshot and rules always give the
    same outcome. ``history`` is only read.
    """
    price = parse_price(submission.price)
    description = (submission.description or "").strip()
    scope_type = normalize_scope_type(submission.scope_type)

    if price <= 0:
        return EngineOutcome(
            result=RecommendationResult(
                price=0,
                scope_type=scope_type,
                description=description,
                ai_low=0,
                ai_high=0,
                upsell_potential=0,
                notes=deterministic_note(NOTE_INSUFFICIENT_INPUT),
            ),
            note_key=NOTE_INSUFFICIENT_INPUT,
        )

    signals = extract_signals(description)
    draft = synthesize_band(price, signals, rules)
    band, tuned = tune_band(draft.band, price, scope_type, history, rules)
    shielded = apply_stress_shield(band, price, draft.upsell_potential, draft.note_key, rules)

    hourly = None
    if signals.approx_hours is not None:
        hourly = round(price / signals.approx_hours, 2)

    result = RecommendationResult(
        price=price,
        scope_type=scope_type,
        description=description,
        ai_low=shielded.band.low,
        ai_high=shielded.band.high,
        upsell_potential=shielded.upsell_potential,
        notes=deterministic_note(shielded.note_key),
        implied_hourly_rate=hourly,
    )
    return EngineOutcome(
        result=result,
        note_key=shielded.note_key,
        rules_fired=draft.rules_fired,
        history_tuned=tuned,
        shield=shielded.triggered,
    )


def build_recommendation(
    submission: JobSubmission,
    history: Sequence[HistoricalEntry] = (),
    rules: BandRules = DEFAULT_RULES,
) -> RecommendationResult:
    return evaluate(submission, history, rules).result
