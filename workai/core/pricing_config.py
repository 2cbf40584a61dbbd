from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from workai.core.config import settings
from workai.pricing.rules import BandRules


def _config_path() -> Path:
    return Path(settings.pricing_config_path)


def read_pricing_config(path: str | Path) -> dict[str, Any]:
    """Parse a pricing YAML file. A missing file is an empty config."""
    config_path = Path(path)
    if not config_path.exists():
        return {}

    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read pricing config '{config_path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in pricing config '{config_path}': {exc}") from exc

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise RuntimeError(
            f"Invalid pricing config '{config_path}': expected a top-level mapping."
        )
    return parsed


def get_pricing_value(config: dict[str, Any], path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'band.base.low_multiplier'."""
    if not path:
        return default

    current: Any = config
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current


# BandRules field -> dot path inside config/pricing.yaml
_RULE_PATHS: dict[str, str] = {
    "base_low_multiplier": "band.base.low_multiplier",
    "base_high_multiplier": "band.base.high_multiplier",
    "floor_multiplier": "band.clamp.floor_multiplier",
    "ceiling_multiplier": "band.clamp.ceiling_multiplier",
    "base_upsell": "band.base.upsell",
    "tiny_job_min_price": "rules.tiny_job.min_price",
    "tiny_job_max_hours": "rules.tiny_job.max_hours",
    "tiny_job_low_multiplier": "rules.tiny_job.low_multiplier",
    "tiny_job_high_multiplier": "rules.tiny_job.high_multiplier",
    "hourly_rate_limit": "rules.extreme_hourly.rate_limit",
    "hourly_low_multiplier": "rules.extreme_hourly.low_multiplier",
    "hourly_high_multiplier": "rules.extreme_hourly.high_multiplier",
    "large_ticket_min_price": "rules.large_ticket.min_price",
    "standard_upsell_cap": "upsell.standard_cap",
    "history_min_entries": "history.min_entries",
    "history_min_samples": "history.min_samples",
    "history_max_relative_width": "history.max_relative_width",
    "history_width_floor": "history.width_floor",
    "history_width_ceiling": "history.width_ceiling",
    "shield_high_ratio": "shield.high_ratio",
    "shield_low_ratio": "shield.low_ratio",
    "shield_low_multiplier": "shield.top_end.low_multiplier",
    "shield_high_multiplier": "shield.top_end.high_multiplier",
    "under_band_upsell_floor": "upsell.under_band_floor",
    "under_band_upsell_cap": "upsell.under_band_cap",
}


def rules_from_config(config: dict[str, Any]) -> BandRules:
    flat = {name: get_pricing_value(config, path) for name, path in _RULE_PATHS.items()}
    try:
        return BandRules.from_mapping(flat)
    except ValueError as exc:
        raise RuntimeError(f"Invalid pricing config: {exc}") from exc


@lru_cache(maxsize=1)
def load_band_rules() -> BandRules:
    return rules_from_config(read_pricing_config(_config_path()))
