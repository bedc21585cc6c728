# fenceforge/core/exceptions.py
"""
Custom exceptions for the application.
"""
from typing import Optional, Dict, Any


class FenceForgeError(Exception):
    """Base exception for all fenceforge errors."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(FenceForgeError):
    """Missing or invalid setting."""
    pass


class LLMError(FenceForgeError):
    """Remote completion call failed (transient until retries run out)."""
    def __init__(self, provider: str, message: str):
        super().__init__(
            f"LLM error ({provider}): {message}",
            {"provider": provider}
        )
        self.provider = provider


class RateLimitError(LLMError):
    """Provider answered 429."""
    def __init__(self, provider: str, message: str = "rate limited"):
        super().__init__(provider, message)


class RetryExhaustedError(LLMError):
    """All attempts failed. Wraps the last underlying error."""
    def __init__(self, provider: str, attempts: int, last_error: Optional[BaseException] = None):
        super().__init__(
            provider,
            f"Failed after {attempts} attempts: {last_error}"
        )
        self.details.update({"attempts": attempts})
        self.attempts = attempts
        self.last_error = last_error


class PersistenceError(FenceForgeError):
    """File persistence error."""
    def __init__(self, path: str, message: str):
        super().__init__(
            f"Cannot write to {path}: {message}",
            {"path": path}
        )
        self.path = path


class NoDirectiveFoundError(FenceForgeError):
    """Response carried no usable directive where one was required."""
    def __init__(self, operation: str, path: Optional[str] = None):
        target = f" for {path}" if path else ""
        super().__init__(
            f"{operation}: model response contained no file directive{target}",
            {"operation": operation, "path": path}
        )
        self.operation = operation
        self.path = path
