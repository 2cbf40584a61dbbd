import asyncio
import sys
import unittest
from dataclasses import replace
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from workai.pricing.notes import NoteContext, note_respects_band, select_note  # noqa: E402

FALLBACK = "Deterministic coaching note."

CONTEXT = NoteContext(
    scope_type="snapshot",
    description="1 min paint touch up",
    price=500,
    ai_low=400,
    ai_high=500,
    upsell_potential=0,
    implied_hourly_rate=30000.0,
)


class FakeRefiner:
    def __init__(self, reply=None, *, error: Exception | None = None, delay_s: float = 0.0):
        self.reply = reply
        self.error = error
        self.delay_s = delay_s
        self.calls: list[NoteContext] = []

    async def refine(self, context: NoteContext) -> str | None:
        self.calls.append(context)
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        return self.reply


class NoteRespectsBandTests(unittest.TestCase):
    def test_amounts_inside_band_are_allowed(self):
        self.assertTrue(note_respects_band("Keep it between $400 and $500.", CONTEXT))
        self.assertTrue(note_respects_band("Your $500 is already the ceiling.", CONTEXT))
        self.assertTrue(note_respects_band("No dollar figures here, 0% upsell.", CONTEXT))

    def test_amounts_outside_band_are_rejected(self):
        self.assertFalse(note_respects_band("You could go to $650 next time.", CONTEXT))
        self.assertFalse(note_respects_band("Drop to $1,200.", CONTEXT))
        self.assertFalse(note_respects_band("Aim for $1.2k.", CONTEXT))
        self.assertFalse(note_respects_band("Charge 650 dollars next time.", CONTEXT))

    def test_operator_price_outside_band_is_rejected(self):
        lean = replace(CONTEXT, price=200, ai_low=400, ai_high=500, upsell_potential=60)
        self.assertFalse(note_respects_band("Your $200 is lean.", lean))
        self.assertTrue(note_respects_band("Move toward $450.", lean))

    def test_bare_numbers_are_not_money(self):
        self.assertTrue(note_respects_band("A 1 hr job with 60% headroom.", CONTEXT))


class SelectNoteTests(unittest.IsolatedAsyncioTestCase):
    async def test_without_refiner_uses_fallback(self):
        self.assertEqual(await select_note(CONTEXT, FALLBACK, None), FALLBACK)

    async def test_refined_text_is_used_once(self):
        refiner = FakeRefiner("  You're at the ceiling; hold $500 only if your finish backs it up.  ")
        note = await select_note(CONTEXT, FALLBACK, refiner)
        self.assertEqual(note, "You're at the ceiling; hold $500 only if your finish backs it up.")
        self.assertEqual(len(refiner.calls), 1)
        self.assertEqual(refiner.calls[0], CONTEXT)

    async def test_empty_reply_uses_fallback(self):
        self.assertEqual(await select_note(CONTEXT, FALLBACK, FakeRefiner("   ")), FALLBACK)
        self.assertEqual(await select_note(CONTEXT, FALLBACK, FakeRefiner(None)), FALLBACK)

    async def test_refiner_error_uses_fallback(self):
        refiner = FakeRefiner(error=RuntimeError("upstream 500"))
        with self.assertLogs("workai.pricing.notes", level="WARNING"):
            note = await select_note(CONTEXT, FALLBACK, refiner)
        self.assertEqual(note, FALLBACK)

    async def test_refiner_timeout_uses_fallback(self):
        refiner = FakeRefiner("Too late.", delay_s=1.0)
        note = await select_note(CONTEXT, FALLBACK, refiner, timeout_s=0.05)
        self.assertEqual(note, FALLBACK)

    async def test_contradicting_reply_uses_fallback(self):
        refiner = FakeRefiner("Great price, you could push it to $900.")
        self.assertEqual(await select_note(CONTEXT, FALLBACK, refiner), FALLBACK)

    async def test_insufficient_input_is_never_refined(self):
        refiner = FakeRefiner("Anything.")
        context = NoteContext(
            scope_type="snapshot",
            description="",
            price=0,
            ai_low=0,
            ai_high=0,
            upsell_potential=0,
            implied_hourly_rate=None,
        )
        self.assertEqual(await select_note(context, FALLBACK, refiner), FALLBACK)
        self.assertEqual(refiner.calls, [])


if __name__ == "__main__":
    unittest.main()
