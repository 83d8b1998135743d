"""All prompt templates for classification, summarization, escalation and replies."""

from __future__ import annotations

from support_router.models.domain import Intent, KnowledgeChunk, Specialist, TrackingSnapshot

CLASSIFY_SYSTEM = (
    "You are an intent classifier for a customer support inbox. Choose the single best "
    "intent_id for the conversation from the provided list. Respond ONLY with a JSON object "
    'like {"intent_id": "<id-or-unknown>", "confidence": <number between 0 and 1>}. '
    'If none fit, use "unknown" with a low confidence.'
)

CLASSIFY_PROMPT = '''Conversation:
"""
{conversation}
"""

Intents:
{intent_list}

Return a JSON object with intent_id and confidence.'''

SUMMARIZE_SYSTEM = (
    "Summarize the provided policy snippets into 3-6 concise bullet rules relevant to the "
    "user query. Keep it short; do not copy long text; preserve every critical condition "
    "(time windows, trigger conditions, required actions). Never drop a conditional clause."
)

SUMMARIZE_PROMPT = """User query: {query}

Snippets:
{snippets}

Return bullet rules."""

ESCALATION_SYSTEM = (
    "You are an escalation checker. Interpret the plain-English rule text, then decide whether "
    "the provided customer message satisfies it. Always respond with JSON only, like "
    '{"escalate": true, "reason": "short explanation"} or '
    '{"escalate": false, "reason": "short explanation"}.'
)

ESCALATION_PROMPT = """Escalation rules: {rules}

Customer message:
{message}

If the rule is satisfied, return {{"escalate": true, "reason": "rule satisfied"}}; otherwise return {{"escalate": false, "reason": "not satisfied"}}."""

GENERIC_PERSONA = (
    "You are a helpful, professional customer support agent replying to a support ticket. "
    "No specialist team has been assigned to this conversation: do not claim expertise in any "
    "particular policy area and do not promise specific outcomes. Acknowledge the request, ask "
    "for any details that are needed, and let the customer know a member of the team will follow up."
)

SPECIALIST_PERSONA = """You are the {name}, a customer support specialist replying to a support ticket.
Role: {description}
Personality: {persona_notes}
Before resolving the request, make sure you have: {required_fields}.
If information is missing, ask for the needed details instead of guessing."""

POLICY_BLOCK = """Relevant policies (follow these exactly; do not invent policy that is not listed):
{summary}"""

TRACKING_BLOCK = """Shipment data (factual, from the carrier; quote it accurately and do not speculate beyond it):
{facts}"""

MAX_REPLY_SCANS = 3


def format_intent_list(intents: list[Intent]) -> str:
    return "\n".join(f"- {i.id}: {i.name} - {i.description}" for i in intents)


def format_snippets(chunks: list[KnowledgeChunk]) -> str:
    return "\n".join(
        f"{i}. {c.title or 'snippet'}: {c.content}" for i, c in enumerate(chunks, 1)
    )


def format_verbatim_rules(chunks: list[KnowledgeChunk]) -> str:
    return "\n".join(f"- {c.title or 'rule'}: {c.content}" for c in chunks)


def format_persona(specialist: Specialist | None) -> str:
    if specialist is None:
        return GENERIC_PERSONA
    return SPECIALIST_PERSONA.format(
        name=specialist.name,
        description=specialist.description,
        persona_notes=specialist.persona_notes or "professional and clear",
        required_fields=", ".join(specialist.required_fields) or "no specific fields",
    )


def format_tracking_facts(snapshot: TrackingSnapshot, max_scans: int = MAX_REPLY_SCANS) -> str:
    lines = [f"Tracking number: {snapshot.tracking_id}"]
    for label, value in (
        ("Carrier", snapshot.carrier),
        ("Status", snapshot.status),
        ("Sub-status", snapshot.substatus),
        ("Estimated delivery", snapshot.eta),
        ("Last event", snapshot.last_event),
        ("Last location", snapshot.last_location),
        ("Last updated", snapshot.updated_at),
    ):
        if value:
            lines.append(f"{label}: {value}")
    recent = snapshot.scans[:max_scans]
    if recent:
        lines.append("Recent scans (newest first):")
        for scan in recent:
            parts = [p for p in (scan.time, scan.location, scan.message or scan.status) if p]
            lines.append("  - " + " | ".join(parts))
    return "\n".join(lines)
