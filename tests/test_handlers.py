"""
Command handler tests - project scaffolding, upgrades and reviews.
"""
import pytest

from fenceforge.core.exceptions import FenceForgeError, LLMError, NoDirectiveFoundError, RetryExhaustedError
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
from fenceforge.handlers.review import review_path_for
from fenceforge.handlers.upgrade import same_path


FENCE = "```"


@pytest.mark.asyncio
async def test_ask_materializes_into_project_dir(make_session, tmp_path):
    session, _ = make_session([f"Sure.\n{FENCE}folder:src{FENCE}\n{FENCE}file:src/a.txt\nA\n{FENCE}"])

    exchange = await session.ask("make a file")

    assert (tmp_path / "src").is_dir()
    assert (tmp_path / "src" / "a.txt").read_text(encoding="utf-8") == "A"
    assert exchange.failures == []


@pytest.mark.asyncio
async def test_create_project_switches_directory(make_session, tmp_path):
    session, provider = make_session([f"{FENCE}file:README.md\n# shop\n{FENCE}"])

    exchange = await create_project(session, "shop", "an online shop")

    assert session.project_dir == tmp_path / "shop"
    assert (tmp_path / "shop" / "README.md").read_text(encoding="utf-8") == "# shop"
    assert "an online shop" in exchange.prompt


@pytest.mark.asyncio
async def test_create_project_requires_name(make_session):
    session, _ = make_session([])

    with pytest.raises(FenceForgeError):
        await create_project(session, "  ", "whatever")


def test_open_project(make_session, tmp_path):
    session, _ = make_session([])
    (tmp_path / "existing").mkdir()

    assert open_project(session, "existing") == tmp_path / "existing"
    with pytest.raises(FenceForgeError):
        open_project(session, "missing")


@pytest.mark.asyncio
async def test_upgrade_file_replaces_content(make_session, tmp_path):
    (tmp_path / "app.py").write_text("print('v1')\n", encoding="utf-8")
    session, provider = make_session([
        f"Here you go:\n{FENCE}file:./app.py\nprint('v2')\n{FENCE}\nI changed the version."
    ])

    await upgrade_file(session, "app.py")

    assert (tmp_path / "app.py").read_text(encoding="utf-8") == "print('v2')"
    assert "print('v1')" in provider.calls[0][-1]["parts"][0]["text"]


@pytest.mark.asyncio
async def test_upgrade_without_directive_keeps_original(make_session, tmp_path):
    (tmp_path / "app.py").write_text("original", encoding="utf-8")
    session, _ = make_session([
        f"I would change a few things.\n{FENCE}file:other.py\nx\n{FENCE}"
    ])

    with pytest.raises(NoDirectiveFoundError) as exc:
        await upgrade_file(session, "app.py")

    assert exc.value.path == "app.py"
    assert (tmp_path / "app.py").read_text(encoding="utf-8") == "original"
    assert not (tmp_path / "other.py").exists()


@pytest.mark.asyncio
async def test_upgrade_missing_file(make_session):
    session, provider = make_session([])

    with pytest.raises(FenceForgeError):
        await upgrade_file(session, "nope.py")

    assert provider.calls == []


@pytest.mark.asyncio
async def test_upgrade_folder_keeps_going_after_a_failure(make_session, tmp_path):
    src = tmp_path / "src"
    (src / "node_modules").mkdir(parents=True)
    (src / "a.js").write_text("a1", encoding="utf-8")
    (src / "b.js").write_text("b1", encoding="utf-8")
    (src / "image.png").write_bytes(b"\x89PNG")
    (src / "node_modules" / "dep.js").write_text("skip me", encoding="utf-8")

    session, provider = make_session([
        "no directive here",
        f"{FENCE}file:src/b.js\nb2\n{FENCE}",
    ])

    result = await upgrade_folder(session, "src")

    assert result.upgraded == ["src/b.js"]
    assert list(result.failed) == ["src/a.js"]
    assert (src / "a.js").read_text(encoding="utf-8") == "a1"
    assert (src / "b.js").read_text(encoding="utf-8") == "b2"
    assert len(provider.calls) == 2


@pytest.mark.asyncio
async def test_upgrade_folder_reports_remote_failures(make_session, tmp_path):
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "x.py").write_text("x", encoding="utf-8")
    session, _ = make_session([LLMError("fake", "down")] * 3, max_attempts=3)

    result = await upgrade_folder(session, "lib")

    assert result.upgraded == []
    assert "lib/x.py" in result.failed


@pytest.mark.asyncio
async def test_upgrade_file_surfaces_terminal_error(make_session, tmp_path):
    (tmp_path / "x.py").write_text("x", encoding="utf-8")
    session, _ = make_session([LLMError("fake", "down")] * 2, max_attempts=2)

    with pytest.raises(RetryExhaustedError):
        await upgrade_file(session, "x.py")


@pytest.mark.asyncio
async def test_review_saved_next_to_file(make_session, tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.js").write_text("let x = 1", encoding="utf-8")
    session, provider = make_session(["1. Overall assessment: fine"])

    review, saved = await review_file(session, "src/app.js", save=True)

    assert review == "1. Overall assessment: fine"
    assert saved == "src/app_review.md"
    assert (tmp_path / "src" / "app_review.md").read_text(encoding="utf-8") == review
    assert len(session.adapter.history) == 0


def test_review_path_for():
    assert review_path_for("index.js") == "index_review.md"
    assert review_path_for("a/b/c.py") == "a/b/c_review.md"


def test_same_path():
    assert same_path("./src/a.js", "src/a.js")
    assert not same_path("src/a.js", "src/b.js")


def test_read_file(make_session, tmp_path):
    (tmp_path / "notes.txt").write_text("hello", encoding="utf-8")
    session, provider = make_session([])

    assert read_file(session, "notes.txt") == "hello"
    with pytest.raises(FenceForgeError):
        read_file(session, "missing.txt")
    with pytest.raises(FenceForgeError):
        read_file(session, "bad\x00name.txt")
    assert provider.calls == []


def test_list_files_marks_folders(make_session, tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "b.txt").write_text("", encoding="utf-8")
    (tmp_path / "a.txt").write_text("", encoding="utf-8")
    session, _ = make_session([])

    assert list_files(session) == ["a.txt", "b.txt", "src/"]
    assert list_files(session, "src") == []
    with pytest.raises(FenceForgeError):
        list_files(session, "nowhere")


def test_search_files_walks_subfolders(make_session, tmp_path):
    (tmp_path / "src" / "node_modules").mkdir(parents=True)
    (tmp_path / "src" / "user_model.py").write_text("", encoding="utf-8")
    (tmp_path / "src" / "node_modules" / "user_lib.js").write_text("", encoding="utf-8")
    (tmp_path / "user.md").write_text("", encoding="utf-8")
    (tmp_path / "other.md").write_text("", encoding="utf-8")
    session, _ = make_session([])

    assert search_files(session, "user") == ["user.md", "src/user_model.py"]
    assert search_files(session, "user", "src") == ["user_model.py"]
    with pytest.raises(FenceForgeError):
        search_files(session, "")
