"""Tests for the escalation rule checker."""

import pytest

from support_router.escalation.checker import EscalationChecker
from support_router.exceptions import EscalationCheckError

RULES = "Escalate if parcel shows delivered but customer claims non-receipt."


async def test_escalates_when_rule_satisfied(scripted_llm):
    llm = scripted_llm(escalation='{"escalate": true, "reason": "claims non-receipt"}')
    verdict = await EscalationChecker(llm).evaluate(RULES, "It says delivered but I have nothing")

    assert verdict.escalate
    assert verdict.reason == "claims non-receipt"
    call = llm.calls_of("escalation")[0]
    assert call["force_json"] is True
    assert call["temperature"] == 0.0
    assert RULES in call["messages"][1]["content"]


async def test_missing_reason_gets_default(scripted_llm):
    llm = scripted_llm(escalation='{"escalate": true}')
    verdict = await EscalationChecker(llm).evaluate(RULES, "never arrived")
    assert verdict.reason == "Escalation rule triggered"


async def test_history_is_included(scripted_llm):
    llm = scripted_llm()
    await EscalationChecker(llm).evaluate(RULES, "still nothing", "user: where is it?")
    content = llm.calls_of("escalation")[0]["messages"][1]["content"]
    assert "user: where is it?" in content
    assert "Latest customer message:\nstill nothing" in content


async def test_unparsable_verdict_raises(scripted_llm):
    llm = scripted_llm(escalation="yes")
    with pytest.raises(EscalationCheckError):
        await EscalationChecker(llm).evaluate(RULES, "never arrived")
