"""
fenceforge - code-model assistant that materializes fenced file/folder
directives from model responses.
"""

__version__ = "0.1.0"

from fenceforge.core.directives import FileDirective, FolderDirective, DirectiveOutcome
from fenceforge.persistence.writer import Materializer
from fenceforge.utils.parser import parse_directives, scan_response
from fenceforge.llm.retry_policy import call_with_retry, ExponentialBackoff, FixedDelay

__all__ = [
    "FileDirective",
    "FolderDirective",
    "DirectiveOutcome",
    "Materializer",
    "parse_directives",
    "scan_response",
    "call_with_retry",
    "ExponentialBackoff",
    "FixedDelay",
]
