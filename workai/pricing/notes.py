from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

NOTE_INSUFFICIENT_INPUT = "insufficient_input"
NOTE_WORKABLE_LANE = "workable_lane"
NOTE_TINY_JOB_CEILING = "tiny_job_ceiling"
NOTE_EXTREME_HOURLY = "extreme_hourly"
NOTE_LARGE_TICKET = "large_ticket"
NOTE_AT_TOP_END = "at_top_end"
NOTE_PRICING_LEAN = "pricing_lean"

DETERMINISTIC_NOTES: dict[str, str] = {
    NOTE_INSUFFICIENT_INPUT: (
        "No price provided. Use real jobs with real numbers to get a useful band."
    ),
    NOTE_WORKABLE_LANE: (
        "You're in a workable lane. If your communication and finish are strong, "
        "you can test the upper side of this band."
    ),
    NOTE_TINY_JOB_CEILING: (
        "This looks like a very small scope at a high rate. You're already at the ceiling; "
        "only hold this if your speed, reliability, and presentation clearly back it up. "
        "No upsell recommended."
    ),
    NOTE_EXTREME_HOURLY: (
        "This implied hourly rate is extremely high for most markets. Treat this as a special case "
        "or adjust toward the lower side of this band if you want to maintain trust."
    ),
    NOTE_LARGE_TICKET: (
        "For higher-ticket work, stay inside this band unless you're clearly offering "
        "premium design, warranty, or speed."
    ),
    NOTE_AT_TOP_END: (
        "You're already at the top end for this kind of job. Hold your number only where "
        "your quality and reliability clearly support it."
    ),
    NOTE_PRICING_LEAN: (
        "You're pricing lean for this kind of job. There's real room to raise your number "
        "on similar work as long as your finish and communication stay strong."
    ),
}

_DOLLAR_AMOUNT_RE = re.compile(
    r"\$\s*(\d[\d,]*(?:\.\d+)?)\s*(k)?\b"
    r"|\b(\d[\d,]*(?:\.\d+)?)\s*(k)?\s*(?:dollars?|bucks|usd)\b",
    re.IGNORECASE,
)


def deterministic_note(note_key: str) -> str:
    return DETERMINISTIC_NOTES[note_key]


@dataclass(frozen=True)
class NoteContext:
    """Fixed facts a refined note has to respect."""

    scope_type: str
    description: str
    price: float
    ai_low: int
    ai_high: int
    upsell_potential: int
    implied_hourly_rate: float | None


class NoteRefiner(Protocol):
    async def refine(self, context: NoteContext) -> str | None: ...


def _dollar_amounts(text: str) -> list[float]:
    amounts: list[float] = []
    for match in _DOLLAR_AMOUNT_RE.finditer(text):
        digits = match.group(1) or match.group(3)
        try:
            value = float(digits.replace(",", ""))
        except ValueError:
            continue
        if match.group(2) or match.group(4):
            value *= 1000
        amounts.append(value)
    return amounts


def note_respects_band(text: str, context: NoteContext) -> bool:
    """True when every money amount in the note lies inside ``[ai_low, ai_high]``.

    Amounts count as money when written as ``$500``, ``$1.2k`` or
    ``500 dollars``. Bare numbers are left alone so durations and upsell
    percentages stay quotable.
    """
    return all(context.ai_low <= amount <= context.ai_high for amount in _dollar_amounts(text))


async def select_note(
    context: NoteContext,
    fallback: str,
    refiner: NoteRefiner | None = None,
    *,
    timeout_s: float = 8.0,
) -> str:
    """Pick the note attached to a result.

    The refiner is called at most once. Any failure, timeout, empty answer,
    or answer quoting a price outside the band yields ``fallback`` verbatim.
    """
    if refiner is None or context.price <= 0:
        return fallback

    try:
        refined = await asyncio.wait_for(refiner.refine(context), timeout=timeout_s)
    except asyncio.TimeoutError:
        logger.warning("note_refiner_timeout timeout_s=%s", timeout_s)
        return fallback
    except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
        logger.warning("note_refiner_failed error=%s", exc)
        return fallback

    text = (refined or "").strip()
    if not text:
        return fallback
    if not note_respects_band(text, context):
        logger.info(
            "note_refiner_rejected reason=out_of_band low=%s high=%s",
            context.ai_low,
            context.ai_high,
        )
        return fallback
    return text
