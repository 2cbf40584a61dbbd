from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

STANDARD_UPSELL_CAP = 40
UNDER_BAND_UPSELL_CAP = 60
UNDER_BAND_UPSELL_FLOOR = 25


@dataclass(frozen=True)
class BandRules:
    """Numeric knobs of the band engine. Defaults are the production values."""

    base_low_multiplier: float = 0.75
    base_high_multiplier: float = 1.25
    floor_multiplier: float = 0.5
    ceiling_multiplier: float = 1.6
    base_upsell: int = 15

    tiny_job_min_price: float = 400.0
    tiny_job_max_hours: float = 0.25
    tiny_job_low_multiplier: float = 0.8
    tiny_job_high_multiplier: float = 1.0

    hourly_rate_limit: float = 1000.0
    hourly_low_multiplier: float = 0.6
    hourly_high_multiplier: float = 0.9

    large_ticket_min_price: float = 2000.0

    standard_upsell_cap: int = STANDARD_UPSELL_CAP

    history_min_entries: int = 5
    history_min_samples: int = 3
    history_max_relative_width: float = 1.5
    history_width_floor: float = 0.15
    history_width_ceiling: float = 0.45

    shield_high_ratio: float = 1.35
    shield_low_ratio: float = 0.65
    shield_low_multiplier: float = 0.9
    shield_high_multiplier: float = 1.05
    under_band_upsell_floor: int = UNDER_BAND_UPSELL_FLOOR
    under_band_upsell_cap: int = UNDER_BAND_UPSELL_CAP

    @classmethod
    def from_mapping(cls, raw: dict[str, Any] | None) -> "BandRules":
        """Build rules from a flat mapping, ignoring unknown keys."""
        if not raw:
            return cls()
        known = {f.name: f.type for f in fields(cls)}
        overrides: dict[str, Any] = {}
        for key, value in raw.items():
            if key not in known or value is None:
                continue
            caster = int if known[key] == "int" else float
            try:
                overrides[key] = caster(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Invalid pricing rule value for '{key}': {value!r}") from exc
        return cls(**overrides)


DEFAULT_RULES = BandRules()
