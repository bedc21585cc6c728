# fenceforge/persistence/writer.py
"""
Materializer - turns directives into filesystem effects.

- Folders are created with all missing ancestors; pre-existence is fine.
- Files get their parent directories created, then are fully replaced.
- Writes are not atomic. Last write wins.

Every I/O failure is raised as PersistenceError carrying the offending path.
The caller decides whether to keep going (the scanner always does).
"""
from pathlib import Path
from typing import Optional, Union

from fenceforge.core.directives import Directive, FileDirective, FolderDirective
from fenceforge.core.exceptions import PersistenceError
from fenceforge.core.logging import log


PathLike = Union[str, Path]


class Materializer:
    """
    Filesystem side of the directive protocol.

    Relative paths resolve against ``root``. Absolute paths are used as-is
    unless ``confine`` is set, in which case anything resolving outside
    ``root`` is rejected.
    """

    def __init__(self, root: Optional[PathLike] = None, confine: bool = False):
        self.root = Path(root) if root is not None else Path.cwd()
        self.confine = confine

    def resolve(self, path: PathLike) -> Path:
        target = self.root / Path(path)

        if self.confine:
            try:
                resolved = target.resolve()
            except (OSError, ValueError) as e:
                raise PersistenceError(str(path), str(e)) from e
            try:
                resolved.relative_to(self.root.resolve())
            except ValueError:
                raise PersistenceError(str(path), "path escapes project root")

        return target

    async def ensure_folder(self, path: PathLike) -> Path:
        target = self.resolve(path)
        # ValueError covers invalid paths (embedded NUL)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError) as e:
            raise PersistenceError(str(path), str(e)) from e

        log("PERSIST", f"📁 Folder ready: {path}")
        return target

    async def write_file(self, path: PathLike, content: str) -> Path:
        target = self.resolve(path)
        try:
            encoded = content.encode("utf-8")
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except (OSError, ValueError) as e:
            raise PersistenceError(str(path), str(e)) from e

        size_kb = round(len(encoded) / 1024, 2)
        log("PERSIST", f"📝 Wrote: {path} ({size_kb} KB)")
        return target

    async def materialize(self, directive: Directive) -> Path:
        """Apply one directive."""
        if isinstance(directive, FolderDirective):
            return await self.ensure_folder(directive.path)
        if isinstance(directive, FileDirective):
            return await self.write_file(directive.path, directive.content)
        raise TypeError(f"Unknown directive type: {type(directive).__name__}")
