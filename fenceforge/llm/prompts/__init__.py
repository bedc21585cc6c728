"""
Prompt templates - organized by command.
"""
from .assistant import (
    PROTOCOL_PROMPT,
    PROTOCOL_ACK,
    PROJECT_CREATE_PROMPT,
    FILE_UPGRADE_PROMPT,
    FILE_REVIEW_PROMPT,
)

__all__ = [
    "PROTOCOL_PROMPT",
    "PROTOCOL_ACK",
    "PROJECT_CREATE_PROMPT",
    "FILE_UPGRADE_PROMPT",
    "FILE_REVIEW_PROMPT",
]
