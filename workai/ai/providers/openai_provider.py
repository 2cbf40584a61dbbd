from __future__ import annotations

import os
from typing import Optional, Sequence

from openai import AsyncOpenAI

from workai.ai.types import ChatMessage


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def openai_configured() -> bool:
    api_key = (os.getenv("OPENAI_API_KEY") or "").strip()
    return bool(api_key) and not _looks_like_placeholder(api_key)


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 20.0,
        max_retries: int = 1,
        temperature: float = 0.2,
        max_tokens: int = 200,
    ):
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            project=(os.getenv("OPENAI_PROJECT_ID") or None),
            timeout=float(os.getenv("OPENAI_TIMEOUT_S", str(timeout_s))),
            max_retries=int(os.getenv("OPENAI_MAX_RETRIES", str(max_retries))),
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=payload,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        if not response.choices:
            return ""
        content = response.choices[0].message.content
        return (content or "").strip()
