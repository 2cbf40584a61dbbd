from .band import BandDraft, PriceBand, round_half_up, synthesize_band
from .engine import EngineOutcome, build_recommendation, evaluate, parse_price
from .history import median, peer_width, tune_band
from .notes import NoteContext, NoteRefiner, deterministic_note, note_respects_band, select_note
from .rules import DEFAULT_RULES, STANDARD_UPSELL_CAP, UNDER_BAND_UPSELL_CAP, BandRules
from .shield import ShieldOutcome, apply_stress_shield
from .signals import TextSignals, approx_hours, extract_signals, looks_like_tiny_job

__all__ = [
    "BandDraft",
    "BandRules",
    "DEFAULT_RULES",
    "EngineOutcome",
    "NoteContext",
    "NoteRefiner",
    "PriceBand",
    "STANDARD_UPSELL_CAP",
    "ShieldOutcome",
    "TextSignals",
    "UNDER_BAND_UPSELL_CAP",
    "apply_stress_shield",
    "approx_hours",
    "build_recommendation",
    "deterministic_note",
    "evaluate",
    "extract_signals",
    "looks_like_tiny_job",
    "median",
    "note_respects_band",
    "parse_price",
    "peer_width",
    "round_half_up",
    "select_note",
    "synthesize_band",
    "tune_band",
]
