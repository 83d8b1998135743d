"""Shared test fixtures and fakes."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from support_router.catalog.memory import InMemoryCatalog
from support_router.config.settings import Settings
from support_router.generation.prompt_templates import (
    CLASSIFY_SYSTEM,
    ESCALATION_SYSTEM,
    SUMMARIZE_SYSTEM,
)
from support_router.models.domain import Intent, KnowledgeChunk, Specialist

_KINDS = {
    CLASSIFY_SYSTEM: "classify",
    SUMMARIZE_SYSTEM: "summarize",
    ESCALATION_SYSTEM: "escalation",
}


class ScriptedLLM:
    """Generation service fake that answers per prompt kind.

    A response may be a string, an exception to raise, or a list consumed in
    order (the last entry repeats).
    """

    def __init__(
        self,
        classify="{\"intent_id\": \"refund\", \"confidence\": 0.92}",
        summarize="- Refunds are issued within 14 days of return receipt.",
        escalation="{\"escalate\": false, \"reason\": \"not satisfied\"}",
        reply="Thanks for reaching out, we are looking into it.",
    ) -> None:
        self.responses = {
            "classify": classify,
            "summarize": summarize,
            "escalation": escalation,
            "reply": reply,
        }
        self.calls: list[dict] = []

    async def complete(
        self,
        messages: list[dict],
        temperature: float = 0.3,
        force_json: bool = False,
    ) -> str:
        kind = _KINDS.get(messages[0]["content"], "reply")
        self.calls.append(
            {
                "kind": kind,
                "messages": messages,
                "temperature": temperature,
                "force_json": force_json,
            }
        )
        response = self.responses[kind]
        if isinstance(response, list):
            response = response.pop(0) if len(response) > 1 else response[0]
        if isinstance(response, Exception):
            raise response
        return response

    def calls_of(self, kind: str) -> list[dict]:
        return [c for c in self.calls if c["kind"] == kind]


class FakeEmbedder:
    """Deterministic embeddings: known texts map to fixed vectors."""

    def __init__(self, vectors: dict[str, list[float]] | None = None, dims: int = 4) -> None:
        self.vectors = vectors or {}
        self._dims = dims
        self.fail_with: Exception | None = None

    @property
    def dimensions(self) -> int:
        return self._dims

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        return [await self.embed_query(t) for t in texts]

    async def embed_query(self, query: str) -> list[float]:
        if self.fail_with is not None:
            raise self.fail_with
        return self.vectors.get(query, [1.0] + [0.0] * (self._dims - 1))


class FakeKnowledgeIndex:
    """Returns its chunks in stored order, ignoring scope unless asked not to."""

    def __init__(self, chunks: list[KnowledgeChunk], supports_scope_filter: bool = False) -> None:
        self.chunks = chunks
        self._supports = supports_scope_filter
        self.searches: list[dict] = []

    @property
    def supports_scope_filter(self) -> bool:
        return self._supports

    async def search(self, embedding, top_k, specialist_id=None, intent_id=None, org_id=None):
        self.searches.append(
            {
                "top_k": top_k,
                "specialist_id": specialist_id,
                "intent_id": intent_id,
                "org_id": org_id,
            }
        )
        return self.chunks[:top_k]


class FakeTrackingProvider:
    def __init__(self, initial: dict, polls: list[dict] | None = None) -> None:
        self.initial = initial
        self.polls = polls or [{}]
        self.initiated: list[tuple] = []
        self.fetches = 0

    async def initiate(self, tracking_id, destination_country=None, language="en") -> dict:
        self.initiated.append((tracking_id, destination_country, language))
        return self.initial

    async def fetch(self, uuid: str) -> dict:
        self.fetches += 1
        index = min(self.fetches, len(self.polls)) - 1
        return self.polls[index]


class RecordingSink:
    def __init__(self, fail: bool = False) -> None:
        self.runs = []
        self.events = []
        self.fail = fail

    async def save_run(self, record) -> None:
        if self.fail:
            raise RuntimeError("sink offline")
        self.runs.append(record)

    async def save_event(self, event) -> None:
        if self.fail:
            raise RuntimeError("sink offline")
        self.events.append(event)

    def event_types(self) -> list[str]:
        return [e.event_type for e in self.events]


@pytest.fixture
def settings():
    """Test settings with temp paths and no retry backoff."""
    tmp = tempfile.mkdtemp()
    return Settings(
        openai_api_key="test-key",
        knowledge_db_path=str(Path(tmp) / "knowledge.db"),
        run_db_path=str(Path(tmp) / "runs.db"),
        faiss_index_path=str(Path(tmp) / "faiss_index"),
        classification_retry_backoff_ms=0,
        tracking_poll_interval_ms=10,
        tracking_max_poll_ms=50,
    )


@pytest.fixture
def specialists():
    return [
        Specialist(
            id="refund-specialist",
            name="Refund Specialist",
            description="Handles billing disputes and refund requests.",
            persona_notes="Empathetic and concise.",
            required_fields=("order_number", "email"),
        ),
        Specialist(
            id="order-tracker",
            name="Order Tracker",
            description="Provides tracking information and delivery status updates.",
            required_fields=("tracking_number", "postcode"),
            escalation_rules="Escalate if parcel shows delivered but customer claims non-receipt.",
        ),
    ]


@pytest.fixture
def intents():
    return [
        Intent(
            id="refund",
            name="Refund request",
            description="Customer wants money back.",
            specialist_id="refund-specialist",
        ),
        Intent(
            id="track-order",
            name="Track order",
            description="Customer asks where their parcel is.",
            specialist_id="order-tracker",
        ),
        Intent(
            id="warranty",
            name="Warranty claim",
            description="Customer reports a faulty product.",
            specialist_id="warranty-team",
        ),
    ]


@pytest.fixture
def catalog(intents, specialists):
    return InMemoryCatalog(intents, specialists)


@pytest.fixture
def policy_chunks():
    return [
        KnowledgeChunk(
            id="kc-refund",
            title="Refund window",
            content="Refunds are issued within 14 days of the return being received.",
            scope_specialist_id="refund-specialist",
            similarity=0.91,
        ),
        KnowledgeChunk(
            id="kc-lost",
            title="Lost in transit - no scans >7 days",
            content="If no tracking updates for 7+ days: treat as lost and offer a replacement.",
            scope_intent_id="track-order",
            similarity=0.84,
        ),
        KnowledgeChunk(
            id="kc-general",
            title="Contact hours",
            content="Support replies within one business day.",
            similarity=0.52,
        ),
    ]


@pytest.fixture
def scripted_llm():
    return ScriptedLLM


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def tracking_provider():
    return FakeTrackingProvider


@pytest.fixture
def knowledge_index():
    return FakeKnowledgeIndex


@pytest.fixture
def tmp_dir():
    """Create a temporary directory."""
    return tempfile.mkdtemp()
