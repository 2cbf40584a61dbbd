import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    max_tokens: int


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = os.getenv("AI_MODEL", "gpt-4.1-mini").strip()
    try:
        max_tokens = int(os.getenv("AI_MAX_TOKENS", "200"))
    except ValueError:
        max_tokens = 200
    return AIConfig(provider=provider, model=model, max_tokens=max_tokens)
