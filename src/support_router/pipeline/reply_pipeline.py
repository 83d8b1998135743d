"""Reply pipeline orchestrator: classify, route, enrich, compose and log one turn."""

from __future__ import annotations

import asyncio

from support_router.classification.intent_classifier import IntentClassifier
from support_router.composition.reply_composer import ReplyComposer
from support_router.config.settings import Settings
from support_router.escalation.checker import EscalationChecker
from support_router.exceptions import (
    ClassificationUnavailable,
    EscalationCheckError,
    RetrievalUnavailable,
    TrackingUnavailable,
)
from support_router.models.domain import (
    UNKNOWN_INTENT,
    ClassificationResult,
    ConversationTurn,
    EscalationVerdict,
    Intent,
    KnowledgeContext,
    PriorTurn,
    RoutingDecision,
    RunRecord,
    RunStatus,
    Specialist,
    TrackingSnapshot,
)
from support_router.models.schemas import ReplyRequest, ReplyResponse, TrackingInfo
from support_router.observability.logger import get_logger
from support_router.observability.metrics import (
    log_latency,
    log_retrieval_metrics,
    log_routing_metrics,
)
from support_router.observability.run_logger import RunLogger
from support_router.observability.tracing import RunTrace
from support_router.protocols.catalog import CatalogProvider
from support_router.retrieval.knowledge_retriever import KnowledgeRetriever
from support_router.retrieval.summarizer import SnippetSummarizer
from support_router.routing.decision_engine import RoutingDecisionEngine
from support_router.tracking.adapter import TrackingAdapter
from support_router.tracking.heuristics import mentions_tracking, tracking_request

logger = get_logger("reply_pipeline")

SUMMARY_CHARS = 200


class ReplyPipeline:
    def __init__(
        self,
        catalog: CatalogProvider,
        classifier: IntentClassifier,
        router: RoutingDecisionEngine,
        retriever: KnowledgeRetriever,
        summarizer: SnippetSummarizer,
        composer: ReplyComposer,
        run_logger: RunLogger,
        settings: Settings,
        tracker: TrackingAdapter | None = None,
        escalation_checker: EscalationChecker | None = None,
    ) -> None:
        self._catalog = catalog
        self._classifier = classifier
        self._router = router
        self._retriever = retriever
        self._summarizer = summarizer
        self._composer = composer
        self._run_logger = run_logger
        self._settings = settings
        self._tracker = tracker
        self._escalation = escalation_checker

    async def execute(self, request: ReplyRequest) -> ReplyResponse:
        trace = RunTrace(request.ticket_id)
        history = [ConversationTurn(role=t.role, content=t.content) for t in request.history]
        prior = (
            PriorTurn(intent_id=request.prior.intent_id, specialist_id=request.prior.specialist_id)
            if request.prior
            else None
        )
        actions: list[str] = []
        decision: RoutingDecision | None = None

        await self._run_logger.record_event(
            request.ticket_id, "message_received", _truncate(request.message)
        )

        try:
            # STEP 1: Catalog
            intents = await self._catalog.intents(request.org_id)
            specialists = await self._catalog.specialists(request.org_id)

            # STEP 2: Classification (bounded retry, then degrade to unknown)
            with trace.span("classification"):
                classification = await self._classify(
                    _render_conversation(history, request.message), intents, actions
                )

            # STEP 3: Routing decision
            with trace.span("routing"):
                decision = self._router.decide(classification, intents, specialists, prior)
            actions.extend(decision.rationale)
            log_routing_metrics(trace.run_id, decision)
            await self._emit_routing_events(request.ticket_id, decision)

            intent = decision.effective_intent
            specialist = decision.effective_specialist

            # STEP 4: Enrichment (tracking, knowledge, escalation run concurrently)
            with trace.span("enrichment"):
                (snapshot, tracking_notes), (knowledge, knowledge_notes), (
                    verdict,
                    escalation_notes,
                ) = await asyncio.gather(
                    self._enrich_tracking(request, intent),
                    self._enrich_knowledge(request, intent, specialist, trace.run_id),
                    self._check_escalation(request, history, specialist),
                )
            actions.extend(tracking_notes + knowledge_notes + escalation_notes)

            # STEP 5: Reply composition
            with trace.span("composition"):
                reply = await self._composer.compose(
                    specialist,
                    knowledge.summary or None,
                    snapshot,
                    history,
                    current_message=request.message,
                )
        except Exception as e:
            await self._record_failure(request, trace, decision, actions, e)
            raise

        status = self._status(decision, verdict)
        record = RunRecord(
            ticket_id=request.ticket_id,
            intent_id=intent.id if intent else None,
            specialist_id=specialist.id if specialist else None,
            input_summary=_truncate(request.message),
            output_summary=_truncate(reply),
            knowledge_sources=[c.title or c.id for c in knowledge.used_chunks],
            status=status,
            rationale=list(actions),
            latency_ms=round(trace.elapsed_ms, 2),
            run_id=trace.run_id,
        )
        await self._run_logger.record_event(
            request.ticket_id, "reply_sent", _truncate(reply), detail=f"status={status}"
        )
        await self._run_logger.record(record)
        log_latency(trace.run_id, trace.ticket_id, trace.span_durations(), trace.elapsed_ms)

        return ReplyResponse(
            reply=reply,
            intent_id=record.intent_id,
            specialist_id=record.specialist_id,
            is_fallback=decision.is_fallback,
            outcome=decision.outcome,
            status=status,
            actions=actions,
            knowledge_sources=record.knowledge_sources,
            tracking=_tracking_info(snapshot),
            run_id=record.run_id,
        )

    async def _classify(
        self, conversation: str, intents: list[Intent], actions: list[str]
    ) -> ClassificationResult:
        attempts = 1 + max(0, self._settings.classification_retries)
        backoff = self._settings.classification_retry_backoff_ms / 1000
        last_error: ClassificationUnavailable | None = None
        for attempt in range(1, attempts + 1):
            try:
                return await self._classifier.classify(conversation, intents)
            except ClassificationUnavailable as e:
                last_error = e
                logger.warning("classification_unavailable", attempt=attempt, error=str(e))
                if attempt < attempts:
                    await asyncio.sleep(backoff * attempt)

        actions.append(
            f"classification unavailable after {attempts} attempt(s) ({last_error}); "
            "routing as unknown intent"
        )
        return ClassificationResult(intent_id=UNKNOWN_INTENT, confidence=0.0)

    async def _emit_routing_events(self, ticket_id: str, decision: RoutingDecision) -> None:
        c = decision.classification
        await self._run_logger.record_event(
            ticket_id,
            "intent_detected",
            f"{c.intent_id} ({c.confidence:.2f})",
            detail=decision.effective_intent.id if decision.effective_intent else "",
        )
        if decision.effective_specialist is not None:
            await self._run_logger.record_event(
                ticket_id,
                "specialist_selected",
                decision.effective_specialist.name,
                detail="fallback" if decision.is_fallback else "",
            )
        else:
            await self._run_logger.record_event(
                ticket_id, "handover", "no specialist matched", detail=decision.outcome
            )

    async def _enrich_tracking(
        self, request: ReplyRequest, intent: Intent | None
    ) -> tuple[TrackingSnapshot | None, list[str]]:
        intent_name = intent.name if intent else None
        tracking_id = tracking_request(request.message, intent_name, request.tracking_id)
        if tracking_id is None:
            if mentions_tracking(request.message, intent_name):
                return None, ["tracking lookup skipped: no tracking id found in message"]
            return None, []

        if self._tracker is None:
            return None, ["tracking lookup skipped: tracking provider not configured"]

        try:
            snapshot = await self._tracker.track_once(tracking_id, request.destination_country)
        except TrackingUnavailable as e:
            logger.warning("tracking_unavailable", tracking_id=tracking_id, error=str(e))
            return None, [f"tracking lookup skipped: {e}"]

        return snapshot, [
            f"tracking lookup for {tracking_id}: status {snapshot.status or 'unknown'}"
        ]

    async def _enrich_knowledge(
        self,
        request: ReplyRequest,
        intent: Intent | None,
        specialist: Specialist | None,
        run_id: str,
    ) -> tuple[KnowledgeContext, list[str]]:
        try:
            chunks = await self._retriever.retrieve(
                request.message,
                specialist_id=specialist.id if specialist else None,
                intent_id=intent.id if intent else None,
                org_id=request.org_id,
            )
        except RetrievalUnavailable as e:
            logger.warning("retrieval_unavailable", error=str(e))
            return KnowledgeContext(summary="", used_chunks=[]), [
                f"knowledge retrieval unavailable ({e}); replying without policy guidance"
            ]

        knowledge = await self._summarizer.summarize(chunks, request.message)
        log_retrieval_metrics(run_id, chunks, knowledge.used_chunks)
        if not knowledge.used_chunks:
            return knowledge, ["no relevant knowledge found"]
        return knowledge, [f"knowledge: {len(knowledge.used_chunks)} snippet(s) used"]

    async def _check_escalation(
        self,
        request: ReplyRequest,
        history: list[ConversationTurn],
        specialist: Specialist | None,
    ) -> tuple[EscalationVerdict | None, list[str]]:
        if (
            self._escalation is None
            or not self._settings.escalation_checks_enabled
            or specialist is None
            or not specialist.escalation_rules.strip()
        ):
            return None, []
        transcript = "\n".join(f"{t.role}: {t.content}" for t in history) or None
        try:
            verdict = await self._escalation.evaluate(
                specialist.escalation_rules, request.message, transcript
            )
        except EscalationCheckError as e:
            logger.warning("escalation_check_failed", error=str(e))
            return None, ["escalation check failed; not escalating"]

        if verdict.escalate:
            await self._run_logger.record_event(
                request.ticket_id, "escalation", verdict.reason, detail=specialist.id
            )
            return verdict, [f"escalation rule triggered: {verdict.reason}"]
        return verdict, []

    @staticmethod
    def _status(decision: RoutingDecision, verdict: EscalationVerdict | None) -> RunStatus:
        if decision.is_handover or (verdict is not None and verdict.escalate):
            return "escalated"
        if decision.is_fallback:
            return "fallback"
        return "success"

    async def _record_failure(
        self,
        request: ReplyRequest,
        trace: RunTrace,
        decision: RoutingDecision | None,
        actions: list[str],
        error: Exception,
    ) -> None:
        intent = decision.effective_intent if decision else None
        specialist = decision.effective_specialist if decision else None
        logger.error(
            "reply_failed",
            ticket_id=request.ticket_id,
            run_id=trace.run_id,
            error_type=type(error).__name__,
            error=str(error),
        )
        await self._run_logger.record_event(
            request.ticket_id, "error", type(error).__name__, detail=str(error)
        )
        await self._run_logger.record(
            RunRecord(
                ticket_id=request.ticket_id,
                intent_id=intent.id if intent else None,
                specialist_id=specialist.id if specialist else None,
                input_summary=_truncate(request.message),
                output_summary=_truncate(f"error: {error}"),
                knowledge_sources=[],
                status="failed",
                rationale=list(actions),
                latency_ms=round(trace.elapsed_ms, 2),
                run_id=trace.run_id,
            )
        )


def _render_conversation(history: list[ConversationTurn], message: str) -> str:
    lines = [f"{t.role}: {t.content}" for t in history]
    last = history[-1] if history else None
    if last is None or last.role != "user" or last.content != message:
        lines.append(f"user: {message}")
    return "\n".join(lines)


def _truncate(text: str, limit: int = SUMMARY_CHARS) -> str:
    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 3] + "..."


def _tracking_info(snapshot: TrackingSnapshot | None) -> TrackingInfo | None:
    if snapshot is None:
        return None
    return TrackingInfo(
        tracking_id=snapshot.tracking_id,
        carrier=snapshot.carrier,
        status=snapshot.status,
        eta=snapshot.eta,
        last_event=snapshot.last_event,
        last_location=snapshot.last_location,
    )
