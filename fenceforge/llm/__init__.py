"""
LLM module - remote completion access, history and retry.
"""
from .adapter import LLMAdapter, accumulate, get_provider
from .history import ChatHistory, Turn
from .retry_policy import (
    ExponentialBackoff,
    FixedDelay,
    RetryContext,
    call_with_retry,
    delay_from_settings,
)

__all__ = [
    "LLMAdapter",
    "accumulate",
    "get_provider",
    "ChatHistory",
    "Turn",
    "ExponentialBackoff",
    "FixedDelay",
    "RetryContext",
    "call_with_retry",
    "delay_from_settings",
]
