"""OpenAI chat-completions generation service."""

from __future__ import annotations

from openai import AsyncOpenAI

from support_router.exceptions import GenerationFailure
from support_router.observability.logger import get_logger

logger = get_logger("openai_provider")


class OpenAIChatProvider:
    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4.1-mini",
        max_tokens: int = 1024,
    ) -> None:
        self._client = AsyncOpenAI(api_key=api_key)
        self._model = model
        self._max_tokens = max_tokens

    async def complete(
        self,
        messages: list[dict],
        temperature: float = 0.3,
        force_json: bool = False,
    ) -> str:
        kwargs: dict = {
            "model": self._model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": self._max_tokens,
        }
        if force_json:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            response = await self._client.chat.completions.create(**kwargs)
        except Exception as e:
            raise GenerationFailure(f"OpenAI completion failed: {e}") from e

        text = (response.choices[0].message.content or "").strip()
        logger.debug(
            "completion",
            model=self._model,
            temperature=temperature,
            force_json=force_json,
            output_len=len(text),
        )
        return text
