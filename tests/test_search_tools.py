import shutil
from pathlib import Path

import pytest

from tool_relay.core.context import ExecutionContext
from tool_relay.core.exceptions import CommandFailedError
from tool_relay.core.tools.builtin import find_files, grep_search

requires_grep = pytest.mark.skipif(shutil.which("grep") is None, reason="grep not installed")
requires_find = pytest.mark.skipif(shutil.which("find") is None, reason="find not installed")


@pytest.fixture
def sample_tree(workdir: Path) -> Path:
    (workdir / "src").mkdir()
    (workdir / "src" / "app.py").write_text("def main():\n    return 'Needle'\n")
    (workdir / "src" / "notes.txt").write_text("a needle in text\n")
    (workdir / "README.md").write_text("nothing here\n")
    return workdir


@requires_grep
class TestGrepSearch:
    @pytest.mark.asyncio
    async def test_case_insensitive_by_default(self, ctx: ExecutionContext, sample_tree: Path) -> None:
        result = await grep_search(ctx, pattern="needle")

        assert result.startswith('Search results for "needle":\n```\n')
        assert "app.py:2:" in result
        assert "notes.txt:1:" in result

    @pytest.mark.asyncio
    async def test_case_sensitive(self, ctx: ExecutionContext, sample_tree: Path) -> None:
        result = await grep_search(ctx, pattern="Needle", case_sensitive=True)
        assert "app.py" in result
        assert "notes.txt" not in result

    @pytest.mark.asyncio
    async def test_file_pattern_filter(self, ctx: ExecutionContext, sample_tree: Path) -> None:
        result = await grep_search(ctx, pattern="needle", file_pattern="*.txt")
        assert "notes.txt" in result
        assert "app.py" not in result

    @pytest.mark.asyncio
    async def test_no_matches(self, ctx: ExecutionContext, sample_tree: Path) -> None:
        assert await grep_search(ctx, pattern="haystack") == "No matches found for pattern: haystack"

    @pytest.mark.asyncio
    async def test_pattern_starting_with_dash_is_not_an_option(self, ctx: ExecutionContext, sample_tree: Path) -> None:
        assert await grep_search(ctx, pattern="-v") == "No matches found for pattern: -v"

    @pytest.mark.asyncio
    async def test_path_starting_with_dash_is_not_an_option(self, ctx: ExecutionContext, sample_tree: Path) -> None:
        with pytest.raises(CommandFailedError):
            await grep_search(ctx, pattern="needle", path="--files-with-matches")


@requires_find
class TestFindFiles:
    @pytest.mark.asyncio
    async def test_finds_files(self, ctx: ExecutionContext, sample_tree: Path) -> None:
        result = await find_files(ctx, pattern="*.py")
        assert result == 'Found 1 file(s) matching "*.py":\n- ./src/app.py'

    @pytest.mark.asyncio
    async def test_directories(self, ctx: ExecutionContext, sample_tree: Path) -> None:
        result = await find_files(ctx, pattern="src", type="directory")
        assert "./src" in result
        assert await find_files(ctx, pattern="src", type="file") == "No files found matching pattern: src"

    @pytest.mark.asyncio
    async def test_both_kinds(self, ctx: ExecutionContext, sample_tree: Path) -> None:
        (sample_tree / "src" / "src").write_text("")
        result = await find_files(ctx, pattern="src", type="both")
        assert result.startswith('Found 2 file(s) matching "src"')

    @pytest.mark.asyncio
    async def test_no_files(self, ctx: ExecutionContext, sample_tree: Path) -> None:
        assert await find_files(ctx, pattern="*.rs") == "No files found matching pattern: *.rs"

    @pytest.mark.asyncio
    async def test_path_starting_with_dash_is_not_an_expression(self, ctx: ExecutionContext, sample_tree: Path) -> None:
        with pytest.raises(CommandFailedError):
            await find_files(ctx, pattern="nomatch", path="-delete")

        assert (sample_tree / "README.md").exists()
        assert (sample_tree / "src" / "app.py").exists()

    @pytest.mark.asyncio
    async def test_absolute_path_searches_under_the_root(self, ctx: ExecutionContext, sample_tree: Path) -> None:
        result = await find_files(ctx, pattern="*.py", path="/src")
        assert result == 'Found 1 file(s) matching "*.py":\n- src/app.py'
