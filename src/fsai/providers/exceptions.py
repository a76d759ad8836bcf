"""
Provider exceptions for FSai.

Defines the errors raised when a call to the model fails.
"""

import asyncio
from enum import Enum

from litellm.exceptions import (
    APIConnectionError,
    APIError,
    AuthenticationError as LiteLLMAuthError,
    BadRequestError,
    ContextWindowExceededError,
    RateLimitError as LiteLLMRateLimitError,
    ServiceUnavailableError,
    Timeout,
)


class FailureType(Enum):
    """Classification of model call failures."""

    RATE_LIMIT = "rate_limit"
    AUTH_ERROR = "auth_error"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    CONTEXT_LENGTH = "context_length"
    INVALID_REQUEST = "invalid_request"
    UNKNOWN = "unknown"


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class UpstreamError(ProviderError):
    """The model call itself failed.

    Ends the current turn as failed; nothing is retried.
    """

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        failure_type: FailureType = FailureType.UNKNOWN,
    ):
        super().__init__(message, provider)
        self.failure_type = failure_type

    @property
    def hint(self) -> str | None:
        """What the user can do about this failure, if anything."""
        return FAILURE_HINTS.get(self.failure_type)


FAILURE_HINTS = {
    FailureType.AUTH_ERROR: "Check the API key in settings.",
    FailureType.RATE_LIMIT: "The model provider is rate limiting requests. Try again later.",
    FailureType.TIMEOUT: "The model did not answer in time. Try again or raise agent.timeout_per_call.",
    FailureType.NETWORK_ERROR: "Could not reach the model provider. Check your connection.",
    FailureType.CONTEXT_LENGTH: "The request was too large for the model. Start a new conversation.",
}


def classify_error(error: Exception) -> FailureType:
    """
    Classify an exception raised by a model call.

    Args:
        error: The exception to classify.

    Returns:
        The failure type classification.
    """
    if isinstance(error, (asyncio.TimeoutError, Timeout)):
        return FailureType.TIMEOUT
    if isinstance(error, LiteLLMRateLimitError):
        return FailureType.RATE_LIMIT
    if isinstance(error, LiteLLMAuthError):
        return FailureType.AUTH_ERROR
    if isinstance(error, ContextWindowExceededError):
        return FailureType.CONTEXT_LENGTH
    if isinstance(error, (APIConnectionError, ServiceUnavailableError)):
        return FailureType.NETWORK_ERROR
    if isinstance(error, BadRequestError):
        return FailureType.INVALID_REQUEST
    if isinstance(error, APIError):
        status = getattr(error, "status_code", None)
        if status and 500 <= status < 600:
            return FailureType.SERVER_ERROR
        if status and 400 <= status < 500:
            return FailureType.INVALID_REQUEST

    return FailureType.UNKNOWN
