# app/core/exceptions.py
"""
Error taxonomy for form generation.

Every failure that can reach a caller has its own class with a stable
``code`` and the HTTP status the routes translate it to, so clients can tell
"try again later" (service errors) from "rephrase your request" (validation
errors) from "misconfigured deployment" (configuration errors).
"""

from typing import Any, Dict, Optional


class FormGenerationError(Exception):
    """Base class for all form generation failures"""

    code = "form_generation_error"
    status_code = 500

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_detail(self) -> Dict[str, Any]:
        detail = {"error": self.code, "message": self.message}
        detail.update({k: v for k, v in self.details.items() if v is not None})
        return detail


class ConfigurationError(FormGenerationError):
    """Missing or invalid provider credential. Detected at startup."""

    code = "configuration_error"
    status_code = 500


class EmbeddingUnavailable(FormGenerationError):
    code = "embedding_unavailable"
    status_code = 503


class EmbeddingServiceError(FormGenerationError):
    code = "embedding_service_error"
    status_code = 502


class GenerationUnavailable(FormGenerationError):
    code = "generation_unavailable"
    status_code = 503


class GenerationServiceError(FormGenerationError):
    code = "generation_service_error"
    status_code = 502


class RetrievalDegraded(FormGenerationError):
    """Similarity search failed. Logged by the pipeline, never surfaced."""

    code = "retrieval_degraded"
    status_code = 200


class SchemaValidationError(FormGenerationError):
    """Model output failed a structural or invariant check"""

    code = "schema_validation_error"
    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None, rule: Optional[str] = None):
        super().__init__(message, field=field, rule=rule)
        self.field = field
        self.rule = rule


class PersistenceError(FormGenerationError):
    code = "persistence_error"
    status_code = 500


class GenerationCancelled(FormGenerationError):
    code = "generation_cancelled"
    status_code = 499


class SubmissionValidationError(FormGenerationError):
    """One or more submitted answers do not satisfy the form schema"""

    code = "submission_validation_error"
    status_code = 422

    def __init__(self, errors: Dict[str, str]):
        super().__init__(
            f"Submission rejected: {len(errors)} invalid answer(s)",
            errors=errors
        )
        self.errors = errors
