# fenceforge/handlers/files.py
"""
file:read / file:list / file:search - local lookups, no model call.
"""
import os
from pathlib import Path
from typing import List

from fenceforge.core.exceptions import FenceForgeError
from fenceforge.session import Session

SKIP_DIRS = {".git", "node_modules", "__pycache__", ".venv", "venv", "dist", "build"}


def read_file(session: Session, path: str) -> str:
    target = session.materializer.resolve(path)
    try:
        return target.read_text(encoding="utf-8")
    except (OSError, ValueError) as e:
        raise FenceForgeError(f"Cannot read {path}: {e}") from e


def list_files(session: Session, path: str = ".") -> List[str]:
    """Entries of one directory, folders suffixed with ``/``."""
    folder = session.materializer.resolve(path or ".")
    try:
        entries = sorted(folder.iterdir(), key=lambda p: p.name)
    except (OSError, ValueError) as e:
        raise FenceForgeError(f"Cannot list {path}: {e}") from e

    return [f"{p.name}/" if p.is_dir() else p.name for p in entries]


def search_files(session: Session, keyword: str, path: str = ".") -> List[str]:
    """Relative paths under ``path`` whose file name contains ``keyword``."""
    if not keyword:
        raise FenceForgeError("file:search needs a keyword")

    root = session.materializer.resolve(path or ".")
    if not root.is_dir():
        raise FenceForgeError(f"Not a directory: {path}")

    matches = []
    for current, dirs, names in os.walk(root):
        dirs[:] = sorted(d for d in dirs if d not in SKIP_DIRS)
        for name in sorted(names):
            if keyword in name:
                matches.append((Path(current) / name).relative_to(root).as_posix())
    return matches
