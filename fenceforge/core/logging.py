import sys
from datetime import datetime
from typing import Any, Optional

from fenceforge.core.config import settings


# ═══════════════════════════════════════════════════════════════════════════════
# LOG FILTERING
# ═══════════════════════════════════════════════════════════════════════════════
# Only these scopes are shown at INFO level
# Everything else (GEMINI, HISTORY, PARSER) is gated behind settings.debug

INFO_SCOPES = {
    "SCANNER",      # Directives found in a response
    "PERSIST",      # Filesystem effects
    "LLM",          # Remote call boundary
    "RETRY",        # Attempts and delays
    "SESSION",      # Project switches
}


def log(scope: str, message: str, data: Any = None, project_id: Optional[str] = None) -> None:
    """
    Unified logging function for fenceforge.

    Only INFO_SCOPES are shown by default.
    Set FENCEFORGE_DEBUG=true to see all scopes.
    """
    if not settings.debug and scope not in INFO_SCOPES:
        return

    timestamp = datetime.now().strftime("%H:%M:%S")
    prefix = f"[{timestamp}] [{scope}]"

    if project_id:
        prefix += f" [{project_id[:12]}]"

    print(f"{prefix} {message}")

    if data:
        print(f"  Data: {data}")

    sys.stdout.flush()


def log_section(scope: str, title: str, project_id: Optional[str] = None) -> None:
    """
    Log a section header with visual separator.
    """
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"\n{'='*60}")
    if project_id:
        print(f"[{timestamp}] [{scope}] [{project_id[:12]}] {title}")
    else:
        print(f"[{timestamp}] [{scope}] {title}")
    print(f"{'='*60}")
    sys.stdout.flush()
