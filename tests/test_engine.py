import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from workai.pricing.engine import MAX_PRICE, build_recommendation, evaluate, parse_price  # noqa: E402
from workai.pricing.notes import (  # noqa: E402
    NOTE_AT_TOP_END,
    NOTE_EXTREME_HOURLY,
    NOTE_INSUFFICIENT_INPUT,
    NOTE_PRICING_LEAN,
    NOTE_TINY_JOB_CEILING,
    deterministic_note,
)
from workai.pricing.rules import BandRules  # noqa: E402
from workai.pricing.shield import SHIELD_TOP_END, SHIELD_UNDER_BAND  # noqa: E402
from workai.schemas.jobs import JobSubmission, RecommendationResult  # noqa: E402


def _history(count: int = 5, *, scope_type: str = "snapshot") -> list[RecommendationResult]:
    return [
        RecommendationResult(
            price=1000,
            scope_type=scope_type,
            description="past job",
            ai_low=850,
            ai_high=1150,
            upsell_potential=15,
            notes="Past job.",
        )
        for _ in range(count)
    ]


class ParsePriceTests(unittest.TestCase):
    def test_accepts_numbers_and_numeric_strings(self):
        self.assertEqual(parse_price(250), 250.0)
        self.assertEqual(parse_price(" 250 "), 250.0)
        self.assertEqual(parse_price("99.5"), 99.5)

    def test_rejects_missing_non_numeric_and_non_positive(self):
        for raw in (None, "", "   ", "abc", "$100", 0, "0", -5, "-1", "nan", "inf", float("inf"), True):
            with self.subTest(raw=raw):
                self.assertEqual(parse_price(raw), 0.0)


class EngineTests(unittest.TestCase):
    def test_tiny_job_at_ceiling(self):
        result = build_recommendation(JobSubmission(price=500, description="1 min paint touch up"))
        self.assertEqual((result.ai_low, result.ai_high, result.upsell_potential), (400, 500, 0))
        self.assertEqual(result.notes, deterministic_note(NOTE_TINY_JOB_CEILING))

    def test_hourly_blow_up(self):
        for description in ("1 hour detail", "1 hr detail", "1hr detail"):
            with self.subTest(description=description):
                outcome = evaluate(JobSubmission(price=30000, description=description))
                result = outcome.result
                self.assertEqual((result.ai_low, result.ai_high, result.upsell_potential), (18000, 27000, 0))
                self.assertEqual(result.implied_hourly_rate, 30000.0)
                self.assertEqual(outcome.note_key, NOTE_EXTREME_HOURLY)

    def test_price_beyond_maximum_is_insufficient_input(self):
        for raw in ("1.5e308", 1.5e308, MAX_PRICE * 10):
            with self.subTest(raw=raw):
                result = build_recommendation(JobSubmission(price=raw, description="1 hr detail"))
                self.assertEqual((result.price, result.ai_low, result.ai_high), (0, 0, 0))
                self.assertEqual(result.notes, deterministic_note(NOTE_INSUFFICIENT_INPUT))

    def test_maximum_price_is_accepted(self):
        result = build_recommendation(JobSubmission(price=MAX_PRICE, description="full estate repaint"))
        self.assertEqual((result.ai_low, result.ai_high), (750_000_000, 1_250_000_000))
        self.assertEqual(result.upsell_potential, 0)

    def test_history_tuning_supersedes_provisional_band(self):
        submission = JobSubmission(price=1000, description="deck wash", scope_type="snapshot")
        untuned = build_recommendation(submission)
        self.assertEqual((untuned.ai_low, untuned.ai_high), (750, 1250))

        outcome = evaluate(submission, _history())
        self.assertTrue(outcome.history_tuned)
        self.assertEqual((outcome.result.ai_low, outcome.result.ai_high), (850, 1150))
        self.assertEqual(outcome.result.upsell_potential, 15)

    def test_history_from_other_scope_is_ignored(self):
        submission = JobSubmission(price=1000, description="deck wash", scope_type="snapshot")
        result = build_recommendation(submission, _history(scope_type="walkaround"))
        self.assertEqual((result.ai_low, result.ai_high), (750, 1250))

    def test_insufficient_input_variant(self):
        for raw in (None, "", "abc", 0, -5, "nan"):
            with self.subTest(raw=raw):
                result = build_recommendation(JobSubmission(price=raw, description="anything"))
                self.assertEqual(result.price, 0)
                self.assertEqual((result.ai_low, result.ai_high, result.upsell_potential), (0, 0, 0))
                self.assertEqual(result.notes, deterministic_note(NOTE_INSUFFICIENT_INPUT))
                self.assertTrue(result.insufficient_input)

    def test_scope_type_defaults_to_snapshot(self):
        self.assertEqual(build_recommendation(JobSubmission(price=100, scope_type="garage")).scope_type, "snapshot")
        self.assertEqual(build_recommendation(JobSubmission(price=100, scope_type=None)).scope_type, "snapshot")
        self.assertEqual(
            build_recommendation(JobSubmission(price=100, scope_type=" WalkAround ")).scope_type,
            "walkaround",
        )

    def test_description_is_trimmed_and_hourly_reported(self):
        result = build_recommendation(JobSubmission(price=300, description="  2 hours wash  "))
        self.assertEqual(result.description, "2 hours wash")
        self.assertEqual(result.implied_hourly_rate, 150.0)

    def test_no_duration_means_no_hourly_rate(self):
        result = build_recommendation(JobSubmission(price=300, description="gutter clean"))
        self.assertIsNone(result.implied_hourly_rate)

    def test_under_band_shield_reachable_for_tiny_prices(self):
        outcome = evaluate(JobSubmission(price=0.5, description="sticker removal"))
        self.assertEqual(outcome.shield, SHIELD_UNDER_BAND)
        self.assertEqual((outcome.result.ai_low, outcome.result.ai_high), (1, 1))
        self.assertEqual(outcome.result.upsell_potential, 60)
        self.assertEqual(outcome.note_key, NOTE_PRICING_LEAN)

    def test_top_end_shield_with_narrow_rules(self):
        rules = BandRules(base_low_multiplier=0.5, base_high_multiplier=0.7)
        outcome = evaluate(JobSubmission(price=100, description="window wash"), rules=rules)
        self.assertEqual(outcome.shield, SHIELD_TOP_END)
        self.assertEqual((outcome.result.ai_low, outcome.result.ai_high), (90, 105))
        self.assertEqual(outcome.result.upsell_potential, 0)
        self.assertEqual(outcome.note_key, NOTE_AT_TOP_END)

    def test_repeated_evaluation_is_identical(self):
        submission = JobSubmission(price=1200, description="3 hours pressure wash", scope_type="walkaround")
        history = _history(scope_type="walkaround")
        first = build_recommendation(submission, history)
        second = build_recommendation(submission, history)
        self.assertEqual(first.model_dump(), second.model_dump())
        self.assertEqual(len(history), 5)

    def test_band_invariants_hold_across_inputs(self):
        prices = (0.01, 0.4, 1, 3, 49.99, 399, 400, 999, 1999, 2000, 2001, 30000, 10_000_000)
        descriptions = (
            "",
            "tiny scratch",
            "1 min paint touch up",
            "2 hours",
            "45 minutes",
            "1 hour detail",
            "full exterior repaint",
        )
        for price in prices:
            for description in descriptions:
                for history in ((), _history()):
                    with self.subTest(price=price, description=description, history=len(history)):
                        outcome = evaluate(JobSubmission(price=price, description=description), history)
                        result = outcome.result
                        self.assertGreater(result.ai_low, 0)
                        self.assertLessEqual(result.ai_low, result.ai_high)
                        self.assertGreaterEqual(result.upsell_potential, 0)
                        if outcome.shield == SHIELD_UNDER_BAND:
                            self.assertGreaterEqual(result.upsell_potential, 25)
                            self.assertLessEqual(result.upsell_potential, 60)
                        else:
                            self.assertLessEqual(result.upsell_potential, 40)
                        self.assertTrue(result.notes)


if __name__ == "__main__":
    unittest.main()
