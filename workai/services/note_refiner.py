from __future__ import annotations

import logging
from functools import lru_cache

from workai.ai.factory import get_ai_client
from workai.ai.providers.openai_provider import openai_configured
from workai.ai.types import AIClient, ChatMessage
from workai.core.config import settings
from workai.pricing.notes import NoteContext, NoteRefiner

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a grounded pricing coach for blue-collar operators. You protect trust. "
    "You never sound like a hype mascot or encourage obvious gouging."
)

HARD_RULES = """Write 2-4 short sentences as a pricing coach for an independent operator.

Hard rules:
- DO NOT contradict the band numbers given. Do not quote any dollar amount outside the band bounds, not even the operator price when it falls outside the band.
- If the implied hourly rate is extremely high (e.g. > $1000/hr) or the description sounds very small vs. price, you MUST say it's at/above ceiling, advise caution, and do NOT praise it as "balanced".
- If UpsellPotential is 0, do not suggest raising the price.
- No "you could charge way more" hype. No coupons. No race-to-the-bottom either.
- Output must be screenshot-safe: if a customer reads it, it should feel fair, grounded, and respectful."""


def _format_money(value: float) -> str:
    if float(value).is_integer():
        return f"${int(value)}"
    return f"${value:.2f}"


def build_note_messages(context: NoteContext) -> list[ChatMessage]:
    hourly = _format_money(context.implied_hourly_rate) + "/hr" if context.implied_hourly_rate else "n/a"
    summary = (
        "Operator job:\n"
        f"- Scope: {context.scope_type}\n"
        f"- Description: {context.description or 'n/a'}\n"
        f"- Operator price: {_format_money(context.price)}\n"
        f"- Suggested band (fixed): {_format_money(context.ai_low)} - {_format_money(context.ai_high)}\n"
        f"- UpsellPotential (fixed): {context.upsell_potential}%\n"
        f"- ImpliedHourly (if provided): {hourly}\n"
        "\n"
        f"{HARD_RULES}\n"
    )
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=summary),
    ]


class LLMNoteRefiner:
    """Rephrases the deterministic coaching note through a chat model."""

    def __init__(self, client: AIClient):
        self._client = client

    async def refine(self, context: NoteContext) -> str | None:
        text = await self._client.complete(build_note_messages(context))
        return text.strip() or None


@lru_cache(maxsize=1)
def get_note_refiner() -> NoteRefiner | None:
    if not settings.note_refiner_enabled or not openai_configured():
        return None
    try:
        return LLMNoteRefiner(get_ai_client())
    except (RuntimeError, ValueError) as exc:
        logger.warning("note_refiner_unavailable error=%s", exc)
        return None
