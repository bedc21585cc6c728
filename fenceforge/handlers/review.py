# fenceforge/handlers/review.py
"""
file:review - one-off code review, optionally saved next to the file.
"""
from pathlib import Path
from typing import Optional, Tuple

from fenceforge.handlers.files import read_file
from fenceforge.llm.prompts import FILE_REVIEW_PROMPT
from fenceforge.session import Session


def review_path_for(path: str) -> str:
    """``src/app.js`` -> ``src/app_review.md``"""
    p = Path(path)
    return (p.parent / f"{p.stem}_review.md").as_posix()


async def review_file(session: Session, path: str, save: bool = False) -> Tuple[str, Optional[str]]:
    """
    Returns:
        (review text, path of the saved review or None)
    """
    content = read_file(session, path)

    review = await session.adapter.complete(FILE_REVIEW_PROMPT.format(content=content))

    saved = None
    if save:
        saved = review_path_for(path)
        await session.materializer.write_file(saved, review)

    return review, saved
