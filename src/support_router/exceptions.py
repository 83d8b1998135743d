"""Custom exception hierarchy for the support router."""


class SupportRouterError(Exception):
    """Base exception for all support router errors."""


class ConfigurationError(SupportRouterError):
    """Missing or unusable configuration (e.g. no intents configured)."""


class ClassificationUnavailable(SupportRouterError):
    """Intent classification could not be obtained from the generation service."""


class TrackingUnavailable(SupportRouterError):
    """Tracking provider error, missing credentials, or unresolved lookup."""


class RetrievalUnavailable(SupportRouterError):
    """Knowledge retrieval failed (embedding or index)."""


class EmbeddingError(RetrievalUnavailable):
    """Error generating embeddings."""


class GenerationFailure(SupportRouterError):
    """A generation service call failed or returned nothing usable."""


class EscalationCheckError(SupportRouterError):
    """Escalation rule evaluation failed."""
