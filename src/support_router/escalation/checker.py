"""LLM check of a specialist's plain-English escalation rules."""

from __future__ import annotations

import json

from pydantic import ValidationError

from support_router.exceptions import EscalationCheckError
from support_router.generation.prompt_templates import ESCALATION_PROMPT, ESCALATION_SYSTEM
from support_router.models.domain import EscalationVerdict
from support_router.models.schemas import EscalationOutput
from support_router.observability.logger import get_logger
from support_router.protocols.llm import GenerationService

logger = get_logger("escalation")


class EscalationChecker:
    def __init__(self, llm: GenerationService, temperature: float = 0.0) -> None:
        self._llm = llm
        self._temperature = temperature

    async def evaluate(
        self,
        rules_text: str,
        customer_message: str,
        conversation_history: str | None = None,
    ) -> EscalationVerdict:
        message = (
            f"{conversation_history}\nLatest customer message:\n{customer_message}"
            if conversation_history
            else customer_message
        )
        messages = [
            {"role": "system", "content": ESCALATION_SYSTEM},
            {"role": "user", "content": ESCALATION_PROMPT.format(rules=rules_text, message=message)},
        ]
        try:
            raw = await self._llm.complete(
                messages, temperature=self._temperature, force_json=True
            )
            output = EscalationOutput.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            raise EscalationCheckError(f"Unparsable escalation verdict: {e}") from e
        except Exception as e:
            raise EscalationCheckError(f"Escalation check failed: {e}") from e

        verdict = EscalationVerdict(
            escalate=output.escalate,
            reason=output.reason or ("Escalation rule triggered" if output.escalate else "not satisfied"),
        )
        logger.info("escalation_checked", escalate=verdict.escalate, reason=verdict.reason)
        return verdict
