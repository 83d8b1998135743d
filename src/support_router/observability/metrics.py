"""Metric logging helpers for reply runs."""

from __future__ import annotations

from support_router.models.domain import KnowledgeChunk, RoutingDecision
from support_router.observability.logger import get_logger

logger = get_logger("metrics")


def log_routing_metrics(run_id: str, decision: RoutingDecision) -> None:
    logger.info(
        "routing_metrics",
        run_id=run_id,
        classified_intent=decision.classification.intent_id,
        confidence=round(decision.classification.confidence, 4),
        effective_intent=decision.effective_intent.id if decision.effective_intent else None,
        effective_specialist=(
            decision.effective_specialist.id if decision.effective_specialist else None
        ),
        outcome=decision.outcome,
        is_fallback=decision.is_fallback,
    )


def log_retrieval_metrics(
    run_id: str,
    retrieved: list[KnowledgeChunk],
    used: list[KnowledgeChunk],
) -> None:
    logger.info(
        "retrieval_metrics",
        run_id=run_id,
        retrieved=len(retrieved),
        used=len(used),
        top_similarities=[
            round(c.similarity, 4) for c in used if c.similarity is not None
        ],
    )


def log_latency(
    run_id: str, ticket_id: str, spans: dict[str, float], total_ms: float
) -> None:
    logger.info(
        "latency",
        run_id=run_id,
        ticket_id=ticket_id,
        spans=spans,
        total_ms=round(total_ms, 2),
    )
