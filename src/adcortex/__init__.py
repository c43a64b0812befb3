"""
adcortex: client library for the ADCortex contextual advertising API.

Forwards chat messages to the ADCortex matching service in batches and
returns product recommendations to place in the conversation, shielding the
caller from a flaky network with a bounded queue and a circuit breaker.
"""

from adcortex.ad_cache import DEFAULT_CONTEXT_TEMPLATE, format_context
from adcortex.chat_client import AdcortexChatClient, AsyncAdcortexChatClient
from adcortex.client import AdcortexClient
from adcortex.config import ClientConfig
from adcortex.exceptions import (
    AdcortexError,
    ConfigurationError,
    TransportError,
    TransportTimeoutError,
    ValidationError,
)
from adcortex.state import CircuitBreaker, ClientState
from adcortex.types import (
    Ad,
    AdResponse,
    Gender,
    Interest,
    Language,
    Message,
    Platform,
    Role,
    SessionInfo,
    UserInfo,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONTEXT_TEMPLATE",
    "Ad",
    "AdResponse",
    "AdcortexChatClient",
    "AdcortexClient",
    "AdcortexError",
    "AsyncAdcortexChatClient",
    "CircuitBreaker",
    "ClientConfig",
    "ClientState",
    "ConfigurationError",
    "Gender",
    "Interest",
    "Language",
    "Message",
    "Platform",
    "Role",
    "SessionInfo",
    "TransportError",
    "TransportTimeoutError",
    "UserInfo",
    "ValidationError",
    "format_context",
]
