# fenceforge/llm/retry_policy.py
"""
Bounded retry around a remote completion call.

States: Attempting(1..max_attempts) -> Success | ExhaustedFailure

- Success returns the call's result immediately.
- A failure before the last attempt waits ``delay.seconds(attempt)`` and
  tries again.
- A failure on the last attempt raises RetryExhaustedError wrapping it.
- ConfigurationError is never retried.

When a ChatHistory is supplied, it is checkpointed before every attempt and
rolled back after a failed one, so each retry sees the same history.
"""
import asyncio
import random
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional

from fenceforge.core.config import settings
from fenceforge.core.exceptions import ConfigurationError, RetryExhaustedError
from fenceforge.core.logging import log
from fenceforge.llm.history import ChatHistory


class FixedDelay:
    """Same wait before every retry."""

    def __init__(self, seconds: float = 5.0):
        self.delay = seconds

    def seconds(self, attempt: int) -> float:
        return self.delay


class ExponentialBackoff:
    """
    ``base * 2**(attempt - 1)`` plus up to ``jitter`` seconds of noise.

    With the defaults: ~1s, ~2s, ~4s, ~8s ...
    """

    def __init__(
        self,
        base: float = 1.0,
        jitter: float = 1.0,
        rng: Callable[[], float] = random.random,
    ):
        self.base = base
        self.jitter = jitter
        self.rng = rng

    def seconds(self, attempt: int) -> float:
        return self.base * (2 ** (attempt - 1)) + self.rng() * self.jitter


def delay_from_settings(name: Optional[str] = None):
    """Build the configured delay strategy (``exponential`` or ``fixed``)."""
    name = (name or settings.llm.backoff).lower()
    if name == "exponential":
        return ExponentialBackoff(settings.llm.backoff_base, settings.llm.backoff_jitter)
    if name == "fixed":
        return FixedDelay(settings.llm.fixed_delay)
    raise ConfigurationError(f"Unknown backoff strategy: {name}")


@dataclass
class RetryContext:
    """
    Bookkeeping for one call_with_retry invocation.

    ``attempt`` is 0 before the first call, then the 1-based number of the
    attempt in progress (or the last one made).
    """
    max_attempts: int
    attempt: int = 0
    errors: List[BaseException] = field(default_factory=list)

    @property
    def last_error(self) -> Optional[BaseException]:
        return self.errors[-1] if self.errors else None

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts


async def call_with_retry(
    call: Callable[[], Awaitable[Any]],
    max_attempts: Optional[int] = None,
    delay=None,
    history: Optional[ChatHistory] = None,
    provider: str = "remote",
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    context: Optional[RetryContext] = None,
) -> Any:
    """
    Run ``call`` until it succeeds or ``max_attempts`` is used up.

    Args:
        call: zero-argument coroutine function performing one attempt
        max_attempts: bound on attempts (defaults to settings)
        delay: strategy with ``seconds(attempt)``; defaults to settings
        history: rolled back to its pre-attempt state after each failure
        provider: name used in errors and logs
        sleep: awaited between attempts
        context: optional RetryContext to record attempts into

    Returns:
        Whatever ``call`` returned on the successful attempt

    Raises:
        RetryExhaustedError: after the final failed attempt
    """
    max_attempts = max_attempts if max_attempts is not None else settings.llm.max_attempts
    if max_attempts < 1:
        raise ConfigurationError(f"max_attempts must be >= 1, got {max_attempts}")

    delay = delay or delay_from_settings()
    ctx = context or RetryContext(max_attempts=max_attempts)
    ctx.max_attempts = max_attempts

    while not ctx.exhausted:
        ctx.attempt += 1
        checkpoint = history.checkpoint() if history is not None else None

        try:
            result = await call()
        except ConfigurationError:
            # Bad settings fail on the first attempt
            if history is not None:
                history.rollback(checkpoint)
            raise
        except Exception as e:
            ctx.errors.append(e)
            if history is not None:
                history.rollback(checkpoint)

            log("RETRY", f"⚠️ {provider} attempt {ctx.attempt}/{max_attempts} failed: {e}")

            if ctx.exhausted:
                break

            wait = delay.seconds(ctx.attempt)
            log("RETRY", f"⏳ Retrying in {wait:.1f}s...")
            await sleep(wait)
            continue

        if ctx.attempt > 1:
            log("RETRY", f"✅ {provider} succeeded on attempt {ctx.attempt}")
        return result

    log("RETRY", f"🔒 {provider} gave up after {ctx.attempt} attempts")
    raise RetryExhaustedError(provider, ctx.attempt, ctx.last_error) from ctx.last_error
