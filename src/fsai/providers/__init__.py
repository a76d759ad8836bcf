"""
Model provider access for FSai.

Calls go through LiteLLM; the gateway turns responses into proposals.
"""

from fsai.providers.exceptions import (
    FailureType,
    ProviderError,
    UpstreamError,
    classify_error,
)
from fsai.providers.gateway import ModelGateway
from fsai.providers.models import CompletionResponse, Message, Proposal, TokenUsage

__all__ = [
    "CompletionResponse",
    "FailureType",
    "Message",
    "ModelGateway",
    "Proposal",
    "ProviderError",
    "TokenUsage",
    "UpstreamError",
    "classify_error",
]
