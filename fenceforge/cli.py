"""
fenceforge CLI - interactive coding assistant that writes what the model emits

Usage:
    fenceforge chat [--project DIR] [--no-stream]
    fenceforge apply <response_file> [--root DIR] [--policy verbatim|strip]
    fenceforge version
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Tuple

import typer

from fenceforge.core.directives import ContentPolicy, DirectiveOutcome
from fenceforge.core.exceptions import FenceForgeError
from fenceforge.handlers import (
    create_project,
    list_files,
    open_project,
    read_file,
    review_file,
    search_files,
    upgrade_file,
    upgrade_folder,
)
from fenceforge.llm.adapter import LLMAdapter
from fenceforge.persistence.writer import Materializer
from fenceforge.session import Session, content_policy_from_settings, protocol_history
from fenceforge.utils.parser import scan_response

app = typer.Typer(
    name="fenceforge",
    help="Chat with a code model and materialize the files and folders it emits",
    add_completion=False,
)

HELP_TEXT = """
Commands:
  project:create <name> <description...>  scaffold a new project and switch to it
  project:open <path>                     switch the current project
  file:upgrade <path>                     rewrite one file with the model's improved version
  folder:upgrade <path>                   upgrade every source file under a folder
  file:read <path>                        print a file
  file:list [dir]                         list a directory
  file:search <keyword> [dir]             find files whose name contains keyword
  file:review <path> [--save]             code review, optionally saved as <name>_review.md
  help                                    show this message
  exit                                    quit
Anything else is sent to the model as a chat message.
"""


def _print_outcomes(outcomes: List[DirectiveOutcome]) -> None:
    for outcome in outcomes:
        label = "Folder" if outcome.kind.value == "folder" else "File"
        if outcome.success:
            typer.secho(f"✓ {label}: {outcome.path}", fg=typer.colors.GREEN)
        else:
            typer.secho(f"✗ {label}: {outcome.path} ({outcome.error})", fg=typer.colors.RED)


def split_save_flag(rest: str) -> Tuple[str, bool]:
    """``"a.js --save"`` -> ``("a.js", True)``; only a separate last token counts."""
    parts = rest.rsplit(None, 1)
    if len(parts) == 2 and parts[1] == "--save":
        return parts[0], True
    return rest, False


def _echo_chunk(chunk: str) -> None:
    typer.secho(chunk, fg=typer.colors.BLUE, nl=False)


async def dispatch(session: Session, line: str) -> bool:
    """
    Run one command line. Returns False when the loop should stop.

    Raises whatever the handler raises; the loop catches it.
    """
    line = line.strip()
    if not line:
        return True

    verb, _, rest = line.partition(" ")
    verb = verb.lower()
    rest = rest.strip()

    if verb == "exit":
        typer.secho("Goodbye!", fg=typer.colors.GREEN)
        return False

    if verb == "help":
        typer.echo(HELP_TEXT)
        return True

    if verb == "project:create":
        name, _, description = rest.partition(" ")
        exchange = await create_project(session, name, description)
        _print_outcomes(exchange.outcomes)
        typer.secho(f"Current project: {session.project_dir}", fg=typer.colors.CYAN)
        return True

    if verb == "project:open":
        path = open_project(session, rest)
        typer.secho(f"Current project: {path}", fg=typer.colors.CYAN)
        return True

    if verb == "file:upgrade":
        exchange = await upgrade_file(session, rest)
        _print_outcomes(exchange.outcomes)
        return True

    if verb == "folder:upgrade":
        result = await upgrade_folder(session, rest)
        for path in result.upgraded:
            typer.secho(f"✓ Upgraded: {path}", fg=typer.colors.GREEN)
        for path, message in result.failed.items():
            typer.secho(f"✗ {path}: {message}", fg=typer.colors.RED)
        return True

    if verb == "file:read":
        typer.secho(f"Content of {rest}:", fg=typer.colors.CYAN)
        typer.echo(read_file(session, rest))
        return True

    if verb == "file:list":
        typer.secho(f"Files in {rest or 'current directory'}:", fg=typer.colors.CYAN)
        for name in list_files(session, rest or "."):
            typer.secho(name, fg=typer.colors.CYAN)
        return True

    if verb == "file:search":
        keyword, _, folder = rest.partition(" ")
        matches = search_files(session, keyword, folder.strip() or ".")
        typer.secho(f"Files matching '{keyword}':", fg=typer.colors.CYAN)
        for match in matches:
            typer.secho(match, fg=typer.colors.CYAN)
        return True

    if verb == "file:review":
        path, save = split_save_flag(rest)
        review, saved = await review_file(session, path, save=save)
        if not session.adapter.stream:
            typer.echo(review)
        if saved:
            typer.secho(f"Review saved to {saved}", fg=typer.colors.GREEN)
        return True

    exchange = await session.ask(line)
    if not session.adapter.stream:
        typer.echo(exchange.response)
    _print_outcomes(exchange.outcomes)
    return True


def _prompt_line() -> str:
    return typer.prompt("\nEnter your command", default="", show_default=False)


async def run_repl(
    session: Session,
    read_line: Callable[[], str] = _prompt_line,
    handle: Callable[[Session, str], Awaitable[bool]] = dispatch,
) -> None:
    """Command loop. A failing command is reported and the loop goes on."""
    typer.secho("Welcome to fenceforge!", fg=typer.colors.GREEN, bold=True)
    typer.secho('Type "help" for a list of available commands.', fg=typer.colors.CYAN)

    while True:
        try:
            line = read_line()
        except (typer.Abort, EOFError, KeyboardInterrupt):
            typer.echo()
            break

        try:
            if not await handle(session, line):
                break
        except FenceForgeError as e:
            typer.secho(f"\nError: {e.message}", fg=typer.colors.RED)
        finally:
            typer.echo()


@app.command()
def chat(
    project: Optional[Path] = typer.Option(
        None,
        "--project", "-p",
        help="Project directory (defaults to FENCEFORGE_WORKSPACE or cwd)",
        resolve_path=True,
    ),
    no_stream: bool = typer.Option(
        False,
        "--no-stream",
        help="Wait for the whole response instead of streaming it",
    ),
) -> None:
    """Start the interactive assistant."""
    try:
        adapter = LLMAdapter(
            history=protocol_history(),
            stream=False if no_stream else None,
            on_chunk=_echo_chunk,
        )
        session = Session.create(project_dir=project, adapter=adapter)
    except FenceForgeError as e:
        typer.secho(f"Error: {e.message}", fg=typer.colors.RED)
        raise typer.Exit(1)

    asyncio.run(run_repl(session))


@app.command()
def apply(
    response_file: Path = typer.Argument(
        ...,
        help="Saved model response to scan",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    root: Path = typer.Option(
        Path("."),
        "--root", "-r",
        help="Directory relative paths resolve against",
        resolve_path=True,
    ),
    policy: Optional[str] = typer.Option(
        None,
        "--policy",
        help="File content policy: verbatim or strip",
    ),
) -> None:
    """Materialize the directives in a saved response, without calling the model."""
    try:
        content_policy: ContentPolicy = content_policy_from_settings(policy)
    except FenceForgeError as e:
        typer.secho(f"Error: {e.message}", fg=typer.colors.RED)
        raise typer.Exit(1)

    text = response_file.read_text(encoding="utf-8")
    outcomes = asyncio.run(scan_response(text, Materializer(root), content_policy))

    if not outcomes:
        typer.secho("No directives found.", fg=typer.colors.YELLOW)
        return

    _print_outcomes(outcomes)
    if any(not o.success for o in outcomes):
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version."""
    from fenceforge import __version__
    typer.echo(f"fenceforge {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
