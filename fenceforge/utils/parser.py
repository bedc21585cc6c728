# fenceforge/utils/parser.py
"""
Response Scanner - fenced directive protocol

Walks a model response line by line and extracts directives.

FORMAT:
```folder:path/to/dir```          one line, self-contained

```file:path/to/file.ext
file content here
```

RULES:
- A folder line needs its closing fence on the same line.
- A file open line must NOT carry a closing fence.
- A file block ends at a line that is exactly ``` (nothing else).
- A new file open line while a block is still open flushes the open block.
- A block still open at end of text is flushed, never dropped.
- Marker-like lines that don't parse (no path) are plain text.
- Anything outside a block that isn't a marker is prose and is ignored.
"""

from typing import List, Optional

from fenceforge.core.directives import (
    ContentPolicy,
    Directive,
    DirectiveOutcome,
    FileDirective,
    FolderDirective,
)
from fenceforge.core.exceptions import PersistenceError
from fenceforge.core.logging import log
from fenceforge.persistence.writer import Materializer

# ═══════════════════════════════════════════════════════════════════════════════
# MARKERS
# ═══════════════════════════════════════════════════════════════════════════════

FENCE = "```"
FOLDER_PREFIX = FENCE + "folder:"
FILE_PREFIX = FENCE + "file:"


def parse_folder_marker(line: str) -> Optional[str]:
    """Return the folder path if ``line`` is a complete folder directive."""
    if not line.startswith(FOLDER_PREFIX):
        return None

    rest = line[len(FOLDER_PREFIX):].rstrip()
    if not rest.endswith(FENCE):
        return None

    path = rest[:-len(FENCE)].strip()
    return path or None


def parse_file_marker(line: str) -> Optional[str]:
    """Return the file path if ``line`` opens a file block."""
    if not line.startswith(FILE_PREFIX):
        return None

    rest = line[len(FILE_PREFIX):]
    if rest.rstrip().endswith(FENCE):
        return None

    path = rest.strip()
    return path or None


def apply_content_policy(lines: List[str], policy: ContentPolicy) -> str:
    content = "\n".join(lines)
    if policy is ContentPolicy.STRIP:
        return content.strip()
    return content


# ═══════════════════════════════════════════════════════════════════════════════
# PARSER
# ═══════════════════════════════════════════════════════════════════════════════

class DirectiveParser:
    """
    Line-oriented directive parser.

    Can be fed whole lines (``feed_line``) or arbitrary stream chunks
    (``feed``). Call ``finish`` once at end of input to flush any open block.
    Directives come back in the order their markers appeared.
    """

    def __init__(self, content_policy: ContentPolicy = ContentPolicy.VERBATIM):
        self.content_policy = content_policy
        self._current_path: Optional[str] = None
        self._buffer: List[str] = []
        self._pending = ""

    @property
    def in_block(self) -> bool:
        return self._current_path is not None

    def _flush(self) -> List[Directive]:
        if self._current_path is None:
            return []

        directive = FileDirective(
            path=self._current_path,
            content=apply_content_policy(self._buffer, self.content_policy),
        )
        self._current_path = None
        self._buffer = []
        return [directive]

    def feed_line(self, line: str) -> List[Directive]:
        folder_path = parse_folder_marker(line)
        if folder_path is not None:
            return [FolderDirective(path=folder_path)]

        file_path = parse_file_marker(line)
        if file_path is not None:
            # Previous block never closed: keep what it had
            emitted = self._flush()
            if emitted:
                log("PARSER", f"Unterminated block flushed: {emitted[0].path}")
            self._current_path = file_path
            self._buffer = []
            return emitted

        if line == FENCE and self.in_block:
            return self._flush()

        if self.in_block:
            self._buffer.append(line)

        return []

    def feed(self, chunk: str) -> List[Directive]:
        """Consume a stream chunk; only complete lines are parsed."""
        self._pending += chunk
        *lines, self._pending = self._pending.split("\n")

        directives: List[Directive] = []
        for line in lines:
            directives.extend(self.feed_line(line))
        return directives

    def finish(self) -> List[Directive]:
        """End of input: parse the trailing partial line and flush."""
        directives = self.feed_line(self._pending)
        self._pending = ""
        directives.extend(self._flush())
        return directives


def parse_directives(
    text: str,
    content_policy: ContentPolicy = ContentPolicy.VERBATIM,
) -> List[Directive]:
    """
    Parse a complete response into directives.

    Never raises on malformed input; unparseable markers are treated as text.
    """
    if not text or not isinstance(text, str):
        return []

    parser = DirectiveParser(content_policy)
    directives = parser.feed(text)
    directives.extend(parser.finish())
    return directives


# ═══════════════════════════════════════════════════════════════════════════════
# SCAN (parse + materialize)
# ═══════════════════════════════════════════════════════════════════════════════

async def scan_response(
    text: str,
    materializer: Materializer,
    content_policy: ContentPolicy = ContentPolicy.VERBATIM,
) -> List[DirectiveOutcome]:
    """
    Materialize every directive in ``text`` in document order.

    A failing directive is logged and recorded; the scan moves on.
    """
    outcomes: List[DirectiveOutcome] = []

    for directive in parse_directives(text, content_policy):
        try:
            await materializer.materialize(directive)
        except PersistenceError as e:
            log("PERSIST", f"❌ {directive.kind.value} {directive.path}: {e.message}")
            outcomes.append(DirectiveOutcome(directive, success=False, error=e.message))
            continue

        outcomes.append(DirectiveOutcome(directive, success=True))

    if outcomes:
        failed = sum(1 for o in outcomes if not o.success)
        log("SCANNER", f"Applied {len(outcomes) - failed}/{len(outcomes)} directives")

    return outcomes
