# fenceforge/session.py
"""
Per-invocation session state.

Holds what the handlers share: the current project directory, the LLM
adapter (and through it the conversation history) and the scan policy.
Passed explicitly to every handler.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from fenceforge.core.config import settings
from fenceforge.core.directives import ContentPolicy, DirectiveOutcome
from fenceforge.core.exceptions import ConfigurationError
from fenceforge.core.logging import log
from fenceforge.llm.adapter import ChunkCallback, LLMAdapter
from fenceforge.llm.history import ChatHistory, Turn, USER, MODEL
from fenceforge.llm.prompts import PROTOCOL_ACK, PROTOCOL_PROMPT
from fenceforge.persistence.writer import Materializer
from fenceforge.utils.parser import scan_response


def content_policy_from_settings(name: Optional[str] = None) -> ContentPolicy:
    name = (name or settings.workflow.content_policy).lower()
    try:
        return ContentPolicy(name)
    except ValueError:
        raise ConfigurationError(f"Unknown content policy: {name}")


def protocol_history() -> ChatHistory:
    """Fresh history primed with the directive protocol instructions."""
    return ChatHistory(
        preamble=[Turn(USER, PROTOCOL_PROMPT), Turn(MODEL, PROTOCOL_ACK)],
        max_turns=settings.workflow.max_chat_history,
    )


@dataclass
class Exchange:
    """One prompt/response round and what it did to the filesystem."""
    prompt: str
    response: str
    outcomes: List[DirectiveOutcome] = field(default_factory=list)

    @property
    def failures(self) -> List[DirectiveOutcome]:
        return [o for o in self.outcomes if not o.success]


@dataclass
class Session:
    project_dir: Path
    adapter: LLMAdapter
    content_policy: ContentPolicy = ContentPolicy.VERBATIM
    confine: bool = False

    @classmethod
    def create(
        cls,
        project_dir: Optional[Path] = None,
        adapter: Optional[LLMAdapter] = None,
        on_chunk: Optional[ChunkCallback] = None,
        content_policy: Optional[ContentPolicy] = None,
    ) -> "Session":
        if adapter is None:
            adapter = LLMAdapter(history=protocol_history(), on_chunk=on_chunk)

        return cls(
            project_dir=Path(project_dir or settings.paths.workspace_dir),
            adapter=adapter,
            content_policy=content_policy or content_policy_from_settings(),
            confine=settings.workflow.confine_to_root,
        )

    @property
    def materializer(self) -> Materializer:
        return Materializer(self.project_dir, confine=self.confine)

    def open_project(self, path: Path) -> None:
        path = Path(path)
        if not path.is_absolute():
            path = self.project_dir / path
        self.project_dir = path
        log("SESSION", f"Current project: {self.project_dir}")

    async def ask(self, prompt: str) -> Exchange:
        """Send a chat turn and materialize whatever directives come back."""
        response = await self.adapter.send(prompt)
        outcomes = await scan_response(response, self.materializer, self.content_policy)
        return Exchange(prompt=prompt, response=response, outcomes=outcomes)
