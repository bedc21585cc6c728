# fenceforge/core/directives.py
"""
Directive and outcome types.

A directive is one instruction parsed out of a model response:
create a folder, or create/replace a file with content.
"""
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Union


class DirectiveKind(Enum):
    FOLDER = "folder"
    FILE = "file"


class ContentPolicy(Enum):
    """How a file block's joined lines become file content."""
    VERBATIM = "verbatim"   # lines joined with "\n", untouched
    STRIP = "strip"         # joined, then surrounding whitespace removed


@dataclass(frozen=True)
class FolderDirective:
    path: str

    @property
    def kind(self) -> DirectiveKind:
        return DirectiveKind.FOLDER


@dataclass(frozen=True)
class FileDirective:
    path: str
    content: str

    @property
    def kind(self) -> DirectiveKind:
        return DirectiveKind.FILE


Directive = Union[FolderDirective, FileDirective]


@dataclass
class DirectiveOutcome:
    """Result of materializing a single directive."""
    directive: Directive
    success: bool
    error: Optional[str] = None

    @property
    def path(self) -> str:
        return self.directive.path

    @property
    def kind(self) -> DirectiveKind:
        return self.directive.kind
