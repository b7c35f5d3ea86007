"""Error types raised by the LLM orchestration core."""


class ProcurementAIError(Exception):
    """Base class for all errors surfaced to callers of the core."""


class TransportError(ProcurementAIError):
    """The generative-text endpoint failed at the HTTP or stream level.

    Raised for non-2xx responses (before any fragment is delivered) and for
    I/O failures while reading the streamed body. Fragments already handed
    to the caller before a mid-stream failure remain valid.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class ExtractionError(ProcurementAIError):
    """The accumulated completion could not be turned into structured data."""


class RecordValidationError(ExtractionError):
    """The completion parsed as JSON but did not match the expected record."""

    def __init__(self, message: str, errors: list[dict] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []
