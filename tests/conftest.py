# tests/conftest.py
"""
Shared pytest fixtures for fenceforge tests.

Provides:
- A scripted fake provider standing in for the remote completion service
- A no-wait sleep for retry tests
- A session rooted in a temporary project directory
"""
import sys
from pathlib import Path
from typing import Any, List

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from fenceforge.core.directives import ContentPolicy
from fenceforge.llm.adapter import LLMAdapter
from fenceforge.llm.history import ChatHistory
from fenceforge.llm.retry_policy import FixedDelay
from fenceforge.session import Session


# ═══════════════════════════════════════════════════════
# FAKE PROVIDER
# ═══════════════════════════════════════════════════════

class FakeProvider:
    """
    Scripted stand-in for a provider module.

    Each call consumes the next scripted item: an Exception is raised,
    a list of strings is streamed chunk by chunk, a string is returned
    whole (or streamed in small chunks).
    """
    PROVIDER = "fake"

    def __init__(self, script: List[Any]):
        self.script = list(script)
        self.calls: List[List[dict]] = []
        self.kwargs: List[dict] = []

    def _next(self, contents, kwargs):
        self.calls.append(contents)
        self.kwargs.append(kwargs)
        if not self.script:
            raise AssertionError("FakeProvider called more times than scripted")
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def call(self, contents, **kwargs):
        item = self._next(contents, kwargs)
        return item if isinstance(item, str) else "".join(item)

    async def stream(self, contents, **kwargs):
        item = self._next(contents, kwargs)
        chunks = item if isinstance(item, list) else [item[i:i + 5] for i in range(0, len(item), 5)]
        for chunk in chunks:
            yield chunk


class SleepRecorder:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# ═══════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════

@pytest.fixture
def no_sleep():
    return SleepRecorder()


@pytest.fixture
def make_adapter(no_sleep):
    def _make(script, stream=True, max_attempts=3, history=None):
        provider = FakeProvider(script)
        adapter = LLMAdapter(
            provider=provider,
            model="fake-model",
            history=history if history is not None else ChatHistory(max_turns=10),
            max_attempts=max_attempts,
            delay=FixedDelay(5.0),
            stream=stream,
            sleep=no_sleep,
        )
        return adapter, provider
    return _make


@pytest.fixture
def make_session(tmp_path, make_adapter):
    def _make(script, **kwargs):
        adapter, provider = make_adapter(script, **kwargs)
        session = Session(
            project_dir=tmp_path,
            adapter=adapter,
            content_policy=ContentPolicy.VERBATIM,
        )
        return session, provider
    return _make
