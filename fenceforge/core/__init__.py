"""
Core module - settings, logging, errors and shared types.
"""
from .config import settings, Settings
from .directives import (
    ContentPolicy,
    Directive,
    DirectiveKind,
    DirectiveOutcome,
    FileDirective,
    FolderDirective,
)
from .exceptions import (
    FenceForgeError,
    ConfigurationError,
    LLMError,
    RateLimitError,
    RetryExhaustedError,
    PersistenceError,
    NoDirectiveFoundError,
)
from .logging import log, log_section

__all__ = [
    "settings",
    "Settings",
    "ContentPolicy",
    "Directive",
    "DirectiveKind",
    "DirectiveOutcome",
    "FileDirective",
    "FolderDirective",
    "FenceForgeError",
    "ConfigurationError",
    "LLMError",
    "RateLimitError",
    "RetryExhaustedError",
    "PersistenceError",
    "NoDirectiveFoundError",
    "log",
    "log_section",
]
