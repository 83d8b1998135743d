"""Google Gemini generation service using the google-genai SDK."""

from __future__ import annotations

from google import genai
from google.genai import types

from support_router.exceptions import GenerationFailure
from support_router.observability.logger import get_logger

logger = get_logger("gemini")


def split_system(messages: list[dict]) -> tuple[str | None, list[types.Content]]:
    """Gemini takes system text separately; assistant turns map to the "model" role."""
    system_parts: list[str] = []
    contents: list[types.Content] = []
    for m in messages:
        role = m.get("role", "user")
        text = m.get("content", "")
        if role == "system":
            system_parts.append(text)
            continue
        contents.append(
            types.Content(
                role="model" if role == "assistant" else "user",
                parts=[types.Part(text=text)],
            )
        )
    system = "\n\n".join(system_parts) if system_parts else None
    return system, contents


class GeminiProvider:
    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        max_tokens: int = 1024,
    ) -> None:
        self._client = genai.Client(api_key=api_key)
        self._model = model
        self._max_tokens = max_tokens

    async def complete(
        self,
        messages: list[dict],
        temperature: float = 0.3,
        force_json: bool = False,
    ) -> str:
        system, contents = split_system(messages)
        try:
            config = types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=self._max_tokens,
            )
            if system:
                config.system_instruction = system
            if force_json:
                config.response_mime_type = "application/json"

            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=contents,
                config=config,
            )
            return (response.text or "").strip()
        except Exception as e:
            raise GenerationFailure(f"Gemini generation failed: {e}") from e
