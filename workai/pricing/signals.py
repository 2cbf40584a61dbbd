from __future__ import annotations

import re
from dataclasses import dataclass

_HOURS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(hr|hrs|hour|hours)\b")
_MINUTES_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(min|mins|minute|minutes)\b")

# "1 hr" is only a tiny-job cue in combination with the price threshold.
_TINY_JOB_MARKERS: tuple[str, ...] = (
    "1 min",
    "1-min",
    "one minute",
    "5 min",
    "5-min",
    "five minutes",
    "tiny",
    "quick touch",
    "quick stop",
    "1 hr",
    "1hr",
)


@dataclass(frozen=True)
class TextSignals:
    approx_hours: float | None
    tiny_job_signal: bool


def approx_hours(description: str | None) -> float | None:
    """Duration in hours mentioned in free text, or None when no duration is given.

    Hour quantities take precedence over minute quantities. Zero quantities
    carry no information and are reported as unknown.
    """
    text = (description or "").lower()

    hours_match = _HOURS_RE.search(text)
    if hours_match:
        hours = float(hours_match.group(1))
        return hours if hours > 0 else None

    minutes_match = _MINUTES_RE.search(text)
    if minutes_match:
        minutes = float(minutes_match.group(1))
        if minutes > 0:
            return minutes / 60

    return None


def looks_like_tiny_job(description: str | None) -> bool:
    text = (description or "").lower()
    return any(marker in text for marker in _TINY_JOB_MARKERS)


def extract_signals(description: str | None) -> TextSignals:
    return TextSignals(
        approx_hours=approx_hours(description),
        tiny_job_signal=looks_like_tiny_job(description),
    )
