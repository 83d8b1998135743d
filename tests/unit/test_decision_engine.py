"""Tests for the routing decision engine."""

from __future__ import annotations

import pytest

from support_router.models.domain import ClassificationResult, PriorTurn
from support_router.routing.decision_engine import (
    FALLBACK_NOTE,
    HANDOVER_NOTE,
    RoutingDecisionEngine,
)


@pytest.fixture
def engine():
    return RoutingDecisionEngine(confidence_threshold=0.6)


def test_confident_classification_routes_to_mapped_specialist(engine, intents, specialists):
    decision = engine.decide(ClassificationResult("refund", 0.92), intents, specialists)

    assert decision.effective_intent.id == "refund"
    assert decision.effective_specialist.id == "refund-specialist"
    assert decision.outcome == "routed"
    assert not decision.is_fallback
    assert not decision.is_handover
    assert "intent:refund" in decision.tags
    assert "specialist:refund-specialist" in decision.tags


def test_low_confidence_falls_back_to_prior_turn(engine, intents, specialists):
    decision = engine.decide(
        ClassificationResult("refund", 0.3),
        intents,
        specialists,
        PriorTurn(intent_id="track-order", specialist_id="order-tracker"),
    )

    assert decision.is_fallback
    assert decision.outcome == "fallback"
    assert decision.effective_intent.id == "track-order"
    assert decision.effective_specialist.id == "order-tracker"
    assert FALLBACK_NOTE in decision.rationale
    assert "routing:fallback" in decision.tags


def test_low_confidence_on_first_turn_hands_over(engine, intents, specialists):
    decision = engine.decide(ClassificationResult("refund", 0.3), intents, specialists)

    assert decision.effective_intent is None
    assert decision.effective_specialist is None
    assert decision.outcome == "intent_unknown"
    assert decision.is_handover
    assert any(HANDOVER_NOTE in note for note in decision.rationale)
    assert "handover" in decision.tags


def test_threshold_is_inclusive(engine, intents, specialists):
    decision = engine.decide(ClassificationResult("refund", 0.6), intents, specialists)
    assert decision.outcome == "routed"


def test_unknown_intent_with_prior_context_falls_back(engine, intents, specialists):
    decision = engine.decide(
        ClassificationResult("unknown", 0.0),
        intents,
        specialists,
        PriorTurn(intent_id="refund"),
    )
    # Prior specialist comes from the prior intent's mapping when not given.
    assert decision.effective_specialist.id == "refund-specialist"
    assert decision.is_fallback


def test_prior_specialist_overrides_intent_mapping(engine, intents, specialists):
    decision = engine.decide(
        ClassificationResult("unknown", 0.0),
        intents,
        specialists,
        PriorTurn(intent_id="refund", specialist_id="order-tracker"),
    )
    assert decision.effective_intent.id == "refund"
    assert decision.effective_specialist.id == "order-tracker"


def test_unresolvable_specialist_is_handover(engine, intents, specialists):
    decision = engine.decide(ClassificationResult("warranty", 0.95), intents, specialists)

    assert decision.effective_intent.id == "warranty"
    assert decision.effective_specialist is None
    assert decision.outcome == "no_specialist"
    assert "warranty-team" in decision.rationale[2]
    assert HANDOVER_NOTE in decision.rationale[2]


def test_prior_intent_outside_catalog_is_ignored(engine, intents, specialists):
    decision = engine.decide(
        ClassificationResult("unknown", 0.0),
        intents,
        specialists,
        PriorTurn(intent_id="retired-intent"),
    )
    assert not decision.is_fallback
    assert decision.outcome == "intent_unknown"


def test_out_of_catalog_classification_never_routes(engine, intents, specialists):
    decision = engine.decide(ClassificationResult("upsell", 0.99), intents, specialists)
    assert decision.effective_intent is None
    assert "not in the catalog" in decision.rationale[0]


def test_rationale_is_in_decision_order(engine, intents, specialists):
    decision = engine.decide(
        ClassificationResult("refund", 0.2),
        intents,
        specialists,
        PriorTurn(intent_id="track-order"),
    )
    assert len(decision.rationale) == 4
    assert decision.rationale[0].startswith("classified as 'Refund request'")
    assert "below threshold" in decision.rationale[0]
    assert decision.rationale[1] == FALLBACK_NOTE
    assert decision.rationale[2].startswith("routed to specialist 'Order Tracker'")
    assert decision.rationale[3].startswith("tagging hints: ")
