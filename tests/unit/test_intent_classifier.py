"""Tests for the LLM intent classifier."""

from __future__ import annotations

import pytest

from support_router.classification.intent_classifier import IntentClassifier
from support_router.exceptions import ClassificationUnavailable, ConfigurationError
from support_router.models.domain import Intent


async def test_in_catalog_intent_is_returned(scripted_llm, intents):
    llm = scripted_llm(classify='{"intent_id": "track-order", "confidence": 0.81}')
    result = await IntentClassifier(llm).classify("user: where is my parcel?", intents)

    assert result.intent_id == "track-order"
    assert result.confidence == pytest.approx(0.81)
    assert not result.is_unknown


async def test_classification_is_deterministic_json_call(scripted_llm, intents):
    llm = scripted_llm()
    await IntentClassifier(llm).classify("user: refund please", intents)

    call = llm.calls_of("classify")[0]
    assert call["temperature"] == 0.0
    assert call["force_json"] is True
    prompt = call["messages"][1]["content"]
    assert "- refund: Refund request" in prompt
    assert "user: refund please" in prompt


async def test_out_of_catalog_intent_becomes_unknown(scripted_llm, intents):
    llm = scripted_llm(classify='{"intent_id": "cancel-subscription", "confidence": 0.99}')
    result = await IntentClassifier(llm).classify("user: cancel it", intents)

    assert result.is_unknown
    assert result.confidence == 0.0


async def test_confidence_is_clamped(scripted_llm, intents):
    llm = scripted_llm(classify='{"intent_id": "refund", "confidence": 1.7}')
    result = await IntentClassifier(llm).classify("user: refund", intents)
    assert result.confidence == 1.0


async def test_non_finite_confidence_is_not_trusted(scripted_llm, intents):
    llm = scripted_llm(classify='{"intent_id": "refund", "confidence": NaN}')
    result = await IntentClassifier(llm).classify("user: refund", intents)
    assert result.intent_id == "refund"
    assert result.confidence == 0.0


async def test_numeric_intent_id_matches_catalog(scripted_llm):
    catalog = [Intent(id="3", name="Billing", description="Invoice questions.")]
    llm = scripted_llm(classify='{"intent_id": 3, "confidence": 0.8}')
    result = await IntentClassifier(llm).classify("user: my invoice is wrong", catalog)
    assert result.intent_id == "3"
    assert result.confidence == pytest.approx(0.8)


async def test_missing_confidence_defaults_to_zero(scripted_llm, intents):
    llm = scripted_llm(classify='{"intent_id": "refund"}')
    result = await IntentClassifier(llm).classify("user: refund", intents)
    assert result.intent_id == "refund"
    assert result.confidence == 0.0


async def test_unparsable_output_is_unavailable(scripted_llm, intents):
    llm = scripted_llm(classify="refund, probably")
    with pytest.raises(ClassificationUnavailable):
        await IntentClassifier(llm).classify("user: refund", intents)


async def test_non_object_output_is_unavailable(scripted_llm, intents):
    llm = scripted_llm(classify='["refund"]')
    with pytest.raises(ClassificationUnavailable):
        await IntentClassifier(llm).classify("user: refund", intents)


async def test_provider_error_is_unavailable(scripted_llm, intents):
    llm = scripted_llm(classify=RuntimeError("rate limited"))
    with pytest.raises(ClassificationUnavailable, match="rate limited"):
        await IntentClassifier(llm).classify("user: refund", intents)


async def test_empty_catalog_is_configuration_error(scripted_llm):
    llm = scripted_llm()
    with pytest.raises(ConfigurationError):
        await IntentClassifier(llm).classify("user: refund", [])
    assert llm.calls == []
