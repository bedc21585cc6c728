# fenceforge/handlers/project.py
"""
project:create / project:open
"""
from pathlib import Path

from fenceforge.core.exceptions import FenceForgeError
from fenceforge.core.logging import log_section
from fenceforge.llm.prompts import PROJECT_CREATE_PROMPT
from fenceforge.session import Exchange, Session


async def create_project(session: Session, name: str, description: str) -> Exchange:
    """
    Scaffold a new project from the model's directives.

    The project folder becomes the session's current project before the
    prompt is sent, so relative directive paths land inside it.
    """
    name = name.strip()
    if not name:
        raise FenceForgeError("project:create needs a project name")

    log_section("SESSION", f"Creating project {name}")
    await session.materializer.ensure_folder(name)
    session.open_project(Path(name))

    prompt = PROJECT_CREATE_PROMPT.format(
        name=name,
        description=description.strip() or f"A project called {name}",
    )
    return await session.ask(prompt)


def open_project(session: Session, path: str) -> Path:
    """Switch the current project to an existing directory."""
    target = Path(path)
    if not target.is_absolute():
        target = session.project_dir / target
    if not target.is_dir():
        raise FenceForgeError(f"Not a directory: {target}")

    session.open_project(target)
    return session.project_dir
