"""Core domain objects used throughout the system."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal
from uuid import uuid4

UNKNOWN_INTENT = "unknown"

Role = Literal["user", "assistant"]
RunStatus = Literal["success", "fallback", "escalated", "failed"]
RoutingOutcome = Literal["routed", "fallback", "intent_unknown", "no_specialist"]
TicketEventType = Literal[
    "message_received",
    "intent_detected",
    "specialist_selected",
    "reply_sent",
    "handover",
    "escalation",
    "error",
]


@dataclass(frozen=True)
class Intent:
    id: str
    name: str
    description: str
    specialist_id: str | None = None


@dataclass(frozen=True)
class Specialist:
    id: str
    name: str
    description: str
    persona_notes: str = ""
    required_fields: tuple[str, ...] = ()
    knowledge_notes: str = ""
    escalation_rules: str = ""


@dataclass(frozen=True)
class ConversationTurn:
    role: Role
    content: str


@dataclass(frozen=True)
class ClassificationResult:
    intent_id: str
    confidence: float
    raw: str | None = None

    @property
    def is_unknown(self) -> bool:
        return self.intent_id == UNKNOWN_INTENT


@dataclass(frozen=True)
class PriorTurn:
    """Intent/specialist resolved on the previous turn of the same conversation."""

    intent_id: str
    specialist_id: str | None = None


@dataclass
class RoutingDecision:
    effective_intent: Intent | None
    effective_specialist: Specialist | None
    rationale: list[str]
    is_fallback: bool
    outcome: RoutingOutcome
    classification: ClassificationResult
    tags: list[str] = field(default_factory=list)

    @property
    def is_handover(self) -> bool:
        return self.effective_specialist is None


@dataclass(frozen=True)
class KnowledgeChunk:
    id: str
    title: str
    content: str
    scope_specialist_id: str | None = None
    scope_intent_id: str | None = None
    similarity: float | None = None
    org_id: str | None = None


@dataclass
class KnowledgeContext:
    summary: str
    used_chunks: list[KnowledgeChunk]


@dataclass(frozen=True)
class TrackingScan:
    time: str | None = None
    location: str | None = None
    message: str | None = None
    status: str | None = None


@dataclass
class TrackingSnapshot:
    tracking_id: str
    carrier: str | None = None
    status: str | None = None
    substatus: str | None = None
    eta: str | None = None
    last_event: str | None = None
    last_location: str | None = None
    updated_at: str | None = None
    scans: list[TrackingScan] = field(default_factory=list)


@dataclass(frozen=True)
class EscalationVerdict:
    escalate: bool
    reason: str


@dataclass(frozen=True)
class RunRecord:
    ticket_id: str
    intent_id: str | None
    specialist_id: str | None
    input_summary: str
    output_summary: str
    knowledge_sources: list[str]
    status: RunStatus
    rationale: list[str] = field(default_factory=list)
    latency_ms: float = 0.0
    run_id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class TicketEvent:
    ticket_id: str
    event_type: TicketEventType
    summary: str
    detail: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

