"""Pydantic models for API request/response serialization and LLM structured output."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class Turn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class PriorContext(BaseModel):
    intent_id: str
    specialist_id: str | None = None


class ReplyRequest(BaseModel):
    ticket_id: str
    message: str
    history: list[Turn] = Field(default_factory=list)
    prior: PriorContext | None = None
    tracking_id: str | None = None
    destination_country: str | None = None
    org_id: str | None = None


class TrackingInfo(BaseModel):
    tracking_id: str
    carrier: str | None = None
    status: str | None = None
    eta: str | None = None
    last_event: str | None = None
    last_location: str | None = None


class ReplyResponse(BaseModel):
    reply: str
    intent_id: str | None
    specialist_id: str | None
    is_fallback: bool
    outcome: Literal["routed", "fallback", "intent_unknown", "no_specialist"]
    status: Literal["success", "fallback", "escalated", "failed"]
    actions: list[str]
    knowledge_sources: list[str]
    tracking: TrackingInfo | None = None
    run_id: str


class ClassifyRequest(BaseModel):
    message: str
    org_id: str | None = None


class ClassifyResponse(BaseModel):
    intent_id: str
    intent_name: str | None
    confidence: float
    raw: str | None = None


class KnowledgeAddRequest(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    intent_id: str | None = None
    specialist_id: str | None = None
    org_id: str | None = None


class KnowledgeAddResponse(BaseModel):
    chunk_id: str
    status: str


class RunSummary(BaseModel):
    run_id: str
    ticket_id: str
    intent_id: str | None
    specialist_id: str | None
    status: str
    input_summary: str
    output_summary: str
    knowledge_sources: list[str]
    created_at: str


class HealthResponse(BaseModel):
    status: str
    knowledge_chunks: int
    index_size: int
    intents: int
    specialists: int


class ClassifierOutput(BaseModel):
    intent_id: str | None = None
    confidence: float | None = None

    @field_validator("intent_id", mode="before")
    @classmethod
    def _coerce_numeric_id(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class EscalationOutput(BaseModel):
    escalate: bool = False
    reason: str | None = None
