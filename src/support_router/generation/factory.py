"""Builds the configured generation service."""

from __future__ import annotations

from support_router.config.settings import Settings
from support_router.exceptions import ConfigurationError
from support_router.protocols.llm import GenerationService


def create_generation_service(settings: Settings) -> GenerationService:
    if settings.llm_provider == "gemini":
        from support_router.generation.gemini_provider import GeminiProvider

        if not settings.google_api_key:
            raise ConfigurationError("SUPPORT_GOOGLE_API_KEY is required for the gemini provider")
        return GeminiProvider(
            api_key=settings.google_api_key,
            model=settings.gemini_model,
            max_tokens=settings.generation_max_tokens,
        )

    from support_router.generation.openai_provider import OpenAIChatProvider

    if not settings.openai_api_key:
        raise ConfigurationError("SUPPORT_OPENAI_API_KEY is required for the openai provider")
    return OpenAIChatProvider(
        api_key=settings.openai_api_key,
        model=settings.openai_chat_model,
        max_tokens=settings.generation_max_tokens,
    )
