from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

ScopeType = Literal["snapshot", "walkaround"]

DEFAULT_SCOPE_TYPE: ScopeType = "snapshot"
ANONYMOUS_OPERATOR = "anonymous"


def normalize_scope_type(raw: str | None) -> ScopeType:
    value = (raw or "").strip().lower()
    if value == "walkaround":
        return "walkaround"
    return DEFAULT_SCOPE_TYPE


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MediaRef(CamelModel):
    filename: str = Field(max_length=255)
    original_name: str = Field(default="", max_length=255)
    mimetype: str = Field(default="", max_length=120)
    size: int = Field(default=0, ge=0)


class JobSubmission(CamelModel):
    price: str | float | None = None
    description: str | None = Field(default="", max_length=5000)
    scope_type: str | None = DEFAULT_SCOPE_TYPE
    operator_id: str | None = Field(default=ANONYMOUS_OPERATOR, max_length=200)


class RecommendationResult(CamelModel):
    price: float = Field(ge=0)
    scope_type: ScopeType = DEFAULT_SCOPE_TYPE
    description: str = ""
    ai_low: int = Field(ge=0)
    ai_high: int = Field(ge=0)
    upsell_potential: int = Field(ge=0, le=60)
    notes: str = Field(min_length=1)
    implied_hourly_rate: float | None = None
    media_ref: MediaRef | None = None

    @model_validator(mode="after")
    def _validate_band(self) -> "RecommendationResult":
        if self.ai_high < self.ai_low:
            raise ValueError("aiHigh must be greater than or equal to aiLow")
        if self.price > 0 and self.ai_low <= 0:
            raise ValueError("aiLow must be positive when a price is given")
        return self

    @property
    def insufficient_input(self) -> bool:
        return self.price == 0


class StoredJob(RecommendationResult):
    id: str = Field(min_length=1, max_length=64)
    created_at: datetime
    operator_id: str = ANONYMOUS_OPERATOR
