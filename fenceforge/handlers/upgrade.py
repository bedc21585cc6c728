# fenceforge/handlers/upgrade.py
"""
file:upgrade / folder:upgrade

An upgrade only counts if the response carries a replacement block for the
file that was asked about. Without one nothing is written and the original
file stays as it was.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from fenceforge.core.config import settings
from fenceforge.core.directives import FileDirective
from fenceforge.core.exceptions import FenceForgeError, NoDirectiveFoundError
from fenceforge.handlers.files import SKIP_DIRS, read_file
from fenceforge.core.logging import log
from fenceforge.llm.prompts import FILE_UPGRADE_PROMPT
from fenceforge.session import Exchange, Session
from fenceforge.utils.parser import parse_directives, scan_response


def same_path(a: str, b: str) -> bool:
    return os.path.normpath(a) == os.path.normpath(b)


def find_file_directive(text: str, path: str, session: Session) -> Optional[FileDirective]:
    """Last FileDirective in ``text`` targeting ``path`` (later ones win)."""
    match = None
    for directive in parse_directives(text, session.content_policy):
        if isinstance(directive, FileDirective) and same_path(directive.path, path):
            match = directive
    return match


def _relative(session: Session, path: Path) -> str:
    try:
        return path.relative_to(session.project_dir).as_posix()
    except ValueError:
        return str(path)


async def upgrade_file(session: Session, path: str) -> Exchange:
    """
    Ask for an improved version of one file and write it back.

    Raises:
        FenceForgeError: the file can't be read
        NoDirectiveFoundError: the response had no block for this file
        RetryExhaustedError: the remote call kept failing
    """
    content = read_file(session, path)

    prompt = FILE_UPGRADE_PROMPT.format(path=path, content=content)
    response = await session.adapter.send(prompt)

    if find_file_directive(response, path, session) is None:
        raise NoDirectiveFoundError("file:upgrade", path)

    outcomes = await scan_response(response, session.materializer, session.content_policy)
    return Exchange(prompt=prompt, response=response, outcomes=outcomes)


@dataclass
class FolderUpgradeResult:
    upgraded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)


def upgradable_files(folder: Path) -> List[Path]:
    files = []
    for root, dirs, names in os.walk(folder):
        dirs[:] = sorted(d for d in dirs if d not in SKIP_DIRS and not d.startswith("."))
        for name in sorted(names):
            if Path(name).suffix in settings.workflow.upgrade_extensions:
                files.append(Path(root) / name)
    return files


async def upgrade_folder(session: Session, path: str) -> FolderUpgradeResult:
    """Upgrade every eligible file under ``path``, one at a time."""
    folder = session.materializer.resolve(path)
    if not folder.is_dir():
        raise FenceForgeError(f"Not a directory: {path}")

    result = FolderUpgradeResult()
    for file_path in upgradable_files(folder):
        rel = _relative(session, file_path)
        try:
            await upgrade_file(session, rel)
        except FenceForgeError as e:
            log("SCANNER", f"⚠️ Skipped {rel}: {e.message}")
            result.failed[rel] = e.message
            continue
        result.upgraded.append(rel)

    return result
