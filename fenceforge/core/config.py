# fenceforge/core/config.py
"""
Application configuration - single source of truth for all settings.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Tuple
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class LLMSettings:
    """Remote completion service configuration."""
    provider: str = field(default_factory=lambda: os.getenv("FENCEFORGE_PROVIDER", "gemini"))
    model: str = field(default_factory=lambda: os.getenv("FENCEFORGE_MODEL", "gemini-1.5-pro"))
    # API_KEY is what the old scripts read from .env
    gemini_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    )
    temperature: float = 0.9
    top_k: int = 26
    top_p: float = 0.2
    max_output_tokens: int = field(default_factory=lambda: int(os.getenv("FENCEFORGE_MAX_OUTPUT_TOKENS", "8192")))
    safety_threshold: str = "BLOCK_NONE"
    request_timeout: int = 120
    stream: bool = field(default_factory=lambda: _env_bool("FENCEFORGE_STREAM", "true"))

    # Retry / backoff
    max_attempts: int = field(default_factory=lambda: int(os.getenv("FENCEFORGE_MAX_ATTEMPTS", "5")))
    backoff: str = field(default_factory=lambda: os.getenv("FENCEFORGE_BACKOFF", "exponential"))
    fixed_delay: float = 5.0
    backoff_base: float = 1.0
    backoff_jitter: float = 1.0


@dataclass
class WorkflowSettings:
    """Response handling configuration."""
    max_chat_history: int = 10
    content_policy: str = field(default_factory=lambda: os.getenv("FENCEFORGE_CONTENT_POLICY", "verbatim"))
    confine_to_root: bool = field(default_factory=lambda: _env_bool("FENCEFORGE_CONFINE"))
    upgrade_extensions: Tuple[str, ...] = (
        ".py", ".js", ".jsx", ".ts", ".tsx", ".php", ".html", ".css", ".json", ".md",
    )


@dataclass
class PathSettings:
    """Path configuration."""
    workspace_dir: Path = field(default_factory=lambda: Path(
        os.getenv("FENCEFORGE_WORKSPACE") or Path.cwd()
    ))


@dataclass
class Settings:
    """Main application settings."""
    llm: LLMSettings = field(default_factory=LLMSettings)
    workflow: WorkflowSettings = field(default_factory=WorkflowSettings)
    paths: PathSettings = field(default_factory=PathSettings)
    debug: bool = field(default_factory=lambda: _env_bool("FENCEFORGE_DEBUG"))


# Singleton instance
settings = Settings()
