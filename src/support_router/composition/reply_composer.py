"""Layered prompt assembly and final reply generation."""

from __future__ import annotations

from support_router.exceptions import GenerationFailure
from support_router.generation.prompt_templates import (
    POLICY_BLOCK,
    TRACKING_BLOCK,
    format_persona,
    format_tracking_facts,
)
from support_router.models.domain import ConversationTurn, Specialist, TrackingSnapshot
from support_router.observability.logger import get_logger
from support_router.protocols.llm import GenerationService

logger = get_logger("reply_composer")


class ReplyComposer:
    """Builds the reply prompt from the most general layer to the most specific.

    1. persona (specialist, or a generic persona that claims no specialty)
    2. relevant policies from the knowledge summary
    3. shipment facts and the most recent scans
    4. prior conversation turns, in order
    5. the current user message, unless it is already the last turn
    """

    def __init__(self, llm: GenerationService, temperature: float = 0.3) -> None:
        self._llm = llm
        self._temperature = temperature

    def build_messages(
        self,
        specialist: Specialist | None,
        knowledge_summary: str | None,
        tracking_snapshot: TrackingSnapshot | None,
        history: list[ConversationTurn],
        current_message: str | None = None,
    ) -> list[dict]:
        messages = [{"role": "system", "content": format_persona(specialist)}]
        if knowledge_summary and knowledge_summary.strip():
            messages.append(
                {"role": "system", "content": POLICY_BLOCK.format(summary=knowledge_summary.strip())}
            )
        if tracking_snapshot is not None:
            messages.append(
                {
                    "role": "system",
                    "content": TRACKING_BLOCK.format(facts=format_tracking_facts(tracking_snapshot)),
                }
            )
        messages.extend({"role": t.role, "content": t.content} for t in history)

        if current_message and current_message.strip():
            last = history[-1] if history else None
            if last is None or last.role != "user" or last.content != current_message:
                messages.append({"role": "user", "content": current_message})
        return messages

    async def compose(
        self,
        specialist: Specialist | None,
        knowledge_summary: str | None,
        tracking_snapshot: TrackingSnapshot | None,
        history: list[ConversationTurn],
        current_message: str | None = None,
    ) -> str:
        messages = self.build_messages(
            specialist, knowledge_summary, tracking_snapshot, history, current_message
        )
        try:
            reply = await self._llm.complete(messages, temperature=self._temperature)
        except GenerationFailure:
            raise
        except Exception as e:
            raise GenerationFailure(f"Reply generation failed: {e}") from e

        if not reply or not reply.strip():
            raise GenerationFailure("Reply generation returned empty text")

        logger.info(
            "reply_composed",
            specialist_id=specialist.id if specialist else None,
            layers=len(messages) - len(history),
            reply_len=len(reply),
        )
        return reply.strip()
