"""Routing decision engine: confidence gate, conversational memory, specialist resolution."""

from __future__ import annotations

from support_router.models.domain import (
    ClassificationResult,
    Intent,
    PriorTurn,
    RoutingDecision,
    RoutingOutcome,
    Specialist,
)
from support_router.observability.logger import get_logger

logger = get_logger("routing")

FALLBACK_NOTE = "low confidence; retaining prior intent/specialist for context"
HANDOVER_NOTE = "no specialist matched; handover to a human agent"


class RoutingDecisionEngine:
    """Decides the effective intent and specialist for one turn.

    Rationale notes are appended in decision order: classification outcome,
    fallback, specialist resolution, tagging hints. A classification below the
    threshold is only ever recorded, never routed on. Retries are the caller's
    concern.
    """

    def __init__(self, confidence_threshold: float = 0.6) -> None:
        self._threshold = confidence_threshold

    @property
    def threshold(self) -> float:
        return self._threshold

    def decide(
        self,
        classification: ClassificationResult,
        intents: list[Intent],
        specialists: list[Specialist],
        prior_turn: PriorTurn | None = None,
    ) -> RoutingDecision:
        intents_by_id = {i.id: i for i in intents}
        specialists_by_id = {s.id: s for s in specialists}
        rationale: list[str] = []

        # 1. Classification outcome
        trusted = self._trusted_intent(classification, intents_by_id, rationale)

        # 2. Fallback to prior-turn context
        is_fallback = False
        intent = trusted
        specialist_ref: str | None = trusted.specialist_id if trusted else None
        if trusted is not None:
            rationale.append("classification trusted; no fallback applied")
        elif prior_turn is None:
            rationale.append("first turn; no prior context to fall back to")
        else:
            prior_intent = intents_by_id.get(prior_turn.intent_id)
            if prior_intent is None:
                rationale.append(
                    f"prior intent '{prior_turn.intent_id}' is not in the catalog; "
                    "no fallback applied"
                )
            else:
                intent = prior_intent
                specialist_ref = prior_turn.specialist_id or prior_intent.specialist_id
                is_fallback = True
                rationale.append(FALLBACK_NOTE)

        # 3. Specialist resolution
        specialist: Specialist | None = None
        outcome: RoutingOutcome
        if intent is None:
            outcome = "intent_unknown"
            rationale.append(f"intent unknown; {HANDOVER_NOTE}")
        else:
            specialist = specialists_by_id.get(specialist_ref) if specialist_ref else None
            if specialist is None:
                outcome = "no_specialist"
                missing = f"'{specialist_ref}' not found" if specialist_ref else "none assigned"
                rationale.append(
                    f"specialist for intent '{intent.name}' could not be resolved "
                    f"({missing}); {HANDOVER_NOTE}"
                )
            else:
                outcome = "fallback" if is_fallback else "routed"
                rationale.append(f"routed to specialist '{specialist.name}' ({specialist.id})")

        # 4. Tagging hints
        tags = _tags(intent, specialist, is_fallback)
        rationale.append("tagging hints: " + ", ".join(tags))

        decision = RoutingDecision(
            effective_intent=intent,
            effective_specialist=specialist,
            rationale=rationale,
            is_fallback=is_fallback,
            outcome=outcome,
            classification=classification,
            tags=tags,
        )
        logger.info(
            "routing_decided",
            outcome=outcome,
            intent_id=intent.id if intent else None,
            specialist_id=specialist.id if specialist else None,
            is_fallback=is_fallback,
        )
        return decision

    def _trusted_intent(
        self,
        classification: ClassificationResult,
        intents_by_id: dict[str, Intent],
        rationale: list[str],
    ) -> Intent | None:
        confidence = classification.confidence
        if classification.is_unknown:
            rationale.append(
                f"classified as unknown intent (confidence {confidence:.2f}); not trusted"
            )
            return None

        intent = intents_by_id.get(classification.intent_id)
        if intent is None:
            rationale.append(
                f"classified intent '{classification.intent_id}' is not in the catalog; not trusted"
            )
            return None

        if confidence < self._threshold:
            rationale.append(
                f"classified as '{intent.name}' with confidence {confidence:.2f} "
                f"below threshold {self._threshold:.2f}; not trusted"
            )
            return None

        rationale.append(
            f"classified as '{intent.name}' with confidence {confidence:.2f} "
            f"(threshold {self._threshold:.2f})"
        )
        return intent


def _tags(intent: Intent | None, specialist: Specialist | None, is_fallback: bool) -> list[str]:
    tags = [f"intent:{intent.id}" if intent else "intent:unknown"]
    if specialist is not None:
        tags.append(f"specialist:{specialist.id}")
    if is_fallback:
        tags.append("routing:fallback")
    if specialist is None:
        tags.append("handover")
    return tags
