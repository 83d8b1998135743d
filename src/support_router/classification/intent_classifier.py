"""LLM-based intent classification against the configured intent catalog."""

from __future__ import annotations

import json
import math

from pydantic import ValidationError

from support_router.exceptions import ClassificationUnavailable, ConfigurationError
from support_router.generation.prompt_templates import (
    CLASSIFY_PROMPT,
    CLASSIFY_SYSTEM,
    format_intent_list,
)
from support_router.models.domain import UNKNOWN_INTENT, ClassificationResult, Intent
from support_router.models.schemas import ClassifierOutput
from support_router.observability.logger import get_logger
from support_router.protocols.llm import GenerationService

logger = get_logger("intent_classifier")


class IntentClassifier:
    """Asks the generation service for a single catalog intent id plus a confidence.

    The call is made at temperature 0 in JSON mode so identical conversations
    classify identically. Ids outside the catalog are never trusted: they come
    back as ``unknown`` with confidence 0.
    """

    def __init__(self, llm: GenerationService, temperature: float = 0.0) -> None:
        self._llm = llm
        self._temperature = temperature

    async def classify(
        self, conversation_text: str, intents: list[Intent]
    ) -> ClassificationResult:
        if not intents:
            raise ConfigurationError("No intents configured")

        messages = [
            {"role": "system", "content": CLASSIFY_SYSTEM},
            {
                "role": "user",
                "content": CLASSIFY_PROMPT.format(
                    conversation=conversation_text,
                    intent_list=format_intent_list(intents),
                ),
            },
        ]

        try:
            raw = await self._llm.complete(
                messages, temperature=self._temperature, force_json=True
            )
        except Exception as e:
            raise ClassificationUnavailable(f"Classification call failed: {e}") from e

        output = self._parse(raw)
        catalog_ids = {i.id for i in intents}
        intent_id = (output.intent_id or "").strip()

        if intent_id not in catalog_ids:
            if intent_id and intent_id != UNKNOWN_INTENT:
                logger.warning("out_of_catalog_intent", returned=intent_id)
            result = ClassificationResult(intent_id=UNKNOWN_INTENT, confidence=0.0, raw=raw)
        else:
            result = ClassificationResult(
                intent_id=intent_id,
                confidence=_clamp(output.confidence),
                raw=raw,
            )

        logger.info(
            "intent_classified",
            intent_id=result.intent_id,
            confidence=round(result.confidence, 4),
            catalog_size=len(intents),
        )
        return result

    @staticmethod
    def _parse(raw: str) -> ClassifierOutput:
        try:
            data = json.loads(raw)
        except (TypeError, json.JSONDecodeError) as e:
            raise ClassificationUnavailable(f"Unparsable classifier output: {raw!r}") from e
        if not isinstance(data, dict):
            raise ClassificationUnavailable(f"Classifier output is not an object: {raw!r}")
        try:
            return ClassifierOutput.model_validate(data)
        except ValidationError as e:
            raise ClassificationUnavailable(f"Invalid classifier output: {e}") from e


def _clamp(value: float | None) -> float:
    if value is None or not math.isfinite(value):
        return 0.0
    return max(0.0, min(1.0, float(value)))
