from workai.ai.config import load_ai_config
from workai.ai.types import AIClient

from workai.ai.providers.openai_provider import OpenAIProvider


def get_ai_client() -> AIClient:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        return OpenAIProvider(model=cfg.model, max_tokens=cfg.max_tokens)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
