# fenceforge/llm/adapter.py
"""
Unified LLM adapter - single interface for the remote completion service.

- Streamed chunks are accumulated in arrival order into one string.
- Every call goes through call_with_retry.
- Chat turns (send) carry the running history; a failed attempt's
  speculative turns are rolled back before the next attempt.
"""
import asyncio
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional

from fenceforge.core.config import settings
from fenceforge.core.exceptions import ConfigurationError
from fenceforge.core.logging import log
from fenceforge.llm.history import ChatHistory, Turn, USER, MODEL
from fenceforge.llm.retry_policy import call_with_retry, delay_from_settings


ChunkCallback = Callable[[str], None]


def get_provider(name: str):
    """Look up a provider module by name."""
    from .providers import gemini

    provider_map = {
        "gemini": gemini,
    }

    if name not in provider_map:
        raise ConfigurationError(f"Unknown provider: {name}")
    return provider_map[name]


async def accumulate(chunks: AsyncIterator[str], on_chunk: Optional[ChunkCallback] = None) -> str:
    """Concatenate an async chunk stream in arrival order."""
    parts: List[str] = []
    async for chunk in chunks:
        if on_chunk is not None:
            on_chunk(chunk)
        parts.append(chunk)
    return "".join(parts)


class LLMAdapter:
    """
    Binds a provider, a history and a retry policy.

    ``provider`` may be a name (looked up with get_provider) or any object
    exposing async ``call(contents, ...)`` and async-generator
    ``stream(contents, ...)``.
    """

    def __init__(
        self,
        provider: Any = None,
        model: Optional[str] = None,
        history: Optional[ChatHistory] = None,
        max_attempts: Optional[int] = None,
        delay=None,
        stream: Optional[bool] = None,
        on_chunk: Optional[ChunkCallback] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        provider = provider or settings.llm.provider
        if isinstance(provider, str):
            self.provider_name = provider
            self.provider = get_provider(provider)
        else:
            self.provider_name = getattr(provider, "PROVIDER", type(provider).__name__)
            self.provider = provider

        self.model = model or settings.llm.model
        self.history = history if history is not None else ChatHistory(
            max_turns=settings.workflow.max_chat_history
        )
        self.max_attempts = max_attempts or settings.llm.max_attempts
        self.delay = delay or delay_from_settings()
        self.stream = settings.llm.stream if stream is None else stream
        self.on_chunk = on_chunk
        self.sleep = sleep

    async def _generate(
        self,
        contents: List[Dict[str, Any]],
        system_prompt: str,
        temperature: Optional[float],
        max_tokens: Optional[int],
    ) -> str:
        kwargs = dict(
            system_prompt=system_prompt,
            model=self.model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        if self.stream:
            return await accumulate(self.provider.stream(contents, **kwargs), self.on_chunk)
        return await self.provider.call(contents, **kwargs)

    async def send(
        self,
        prompt: str,
        system_prompt: str = "",
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        One conversational turn.

        The prompt and the reply are appended to the history only for the
        attempt that succeeds; the history is then trimmed.

        Raises:
            RetryExhaustedError: if every attempt failed
        """
        async def attempt() -> str:
            self.history.append(USER, prompt)
            text = await self._generate(
                self.history.as_contents(), system_prompt, temperature, max_tokens
            )
            self.history.append(MODEL, text)
            return text

        log("LLM", f"→ {self.provider_name}/{self.model} ({len(prompt)} chars)")
        text = await call_with_retry(
            attempt,
            max_attempts=self.max_attempts,
            delay=self.delay,
            history=self.history,
            provider=self.provider_name,
            sleep=self.sleep,
        )
        self.history.trim()
        log("LLM", f"← {len(text)} chars")
        return text

    async def complete(
        self,
        prompt: str,
        system_prompt: str = "",
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """One-off completion that neither reads nor writes the history."""
        contents = [Turn(USER, prompt).to_content()]

        async def attempt() -> str:
            return await self._generate(contents, system_prompt, temperature, max_tokens)

        return await call_with_retry(
            attempt,
            max_attempts=self.max_attempts,
            delay=self.delay,
            provider=self.provider_name,
            sleep=self.sleep,
        )
