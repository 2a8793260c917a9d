"""Error taxonomy shared by the transcript gateway, chat adapter and API."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-checkable failure categories surfaced to callers."""

    CREDENTIAL_MISSING = "credential_missing"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    EMPTY_TRANSCRIPT = "empty_transcript"
    MALFORMED_RESPONSE = "malformed_response"
    NO_MODEL_AVAILABLE = "no_model_available"
    PROVIDER_ERROR = "provider_error"
    UNKNOWN_ERROR = "unknown_error"


class TranscriptServiceError(Exception):
    """Base class for every error the service reports to its callers.

    Each subclass fixes ``kind`` and the HTTP status the API answers with.
    ``retryable`` tells callers whether calling again is likely to help.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN_ERROR
    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str, *, retryable: bool | None = None) -> None:
        super().__init__(message)
        self.message = message
        if retryable is not None:
            self.retryable = retryable

    def to_dict(self) -> dict[str, object]:
        return {"kind": self.kind.value, "message": self.message, "retryable": self.retryable}


class CredentialMissingError(TranscriptServiceError):
    kind = ErrorKind.CREDENTIAL_MISSING
    status_code = 400


class ProviderUnavailableError(TranscriptServiceError):
    kind = ErrorKind.PROVIDER_UNAVAILABLE
    status_code = 503
    retryable = True


class EmptyTranscriptError(TranscriptServiceError):
    kind = ErrorKind.EMPTY_TRANSCRIPT
    status_code = 404


class MalformedResponseError(TranscriptServiceError):
    kind = ErrorKind.MALFORMED_RESPONSE
    status_code = 502


class NoModelAvailableError(TranscriptServiceError):
    kind = ErrorKind.NO_MODEL_AVAILABLE
    status_code = 503


class ProviderError(TranscriptServiceError):
    """The provider rejected the request (quota, invalid key, unknown model)."""

    kind = ErrorKind.PROVIDER_ERROR
    status_code = 502

    def __init__(self, message: str, *, retryable: bool | None = None) -> None:
        super().__init__(message, retryable=retryable)
        # Quota exhaustion is the one rejection that clears up on its own.
        if self.retryable:
            self.status_code = 429


class UnknownError(TranscriptServiceError):
    kind = ErrorKind.UNKNOWN_ERROR
    status_code = 500
