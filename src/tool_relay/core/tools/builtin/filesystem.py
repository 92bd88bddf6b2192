"""File and directory tools. Relative paths resolve against the context's working directory."""

import asyncio
import shutil
from pathlib import Path, PureWindowsPath
from typing import Annotated

from pydantic import Field

from ...context import ExecutionContext
from ...exceptions import ToolValidationError


def _is_protected_path(path: str) -> bool:
    if path.startswith("/") or path.startswith("\\"):
        return True
    if ".." in Path(path).parts or ".." in PureWindowsPath(path).parts:
        return True
    return bool(PureWindowsPath(path).drive)


async def read_file(
    ctx: ExecutionContext,
    path: Annotated[str, Field(description="Path of the file to read")],
) -> str:
    """Read the contents of a file."""
    ctx.logger.info(f"Reading file: {path}")
    content = await asyncio.to_thread(ctx.resolve(path).read_text, encoding="utf-8")
    return f"File content of {path}:\n```\n{content}\n```"


async def write_file(
    ctx: ExecutionContext,
    path: Annotated[str, Field(description="Path of the file to write")],
    content: Annotated[str, Field(description="Content to write to the file")],
) -> str:
    """Write content to a file, creating parent directories and overwriting existing content."""
    ctx.logger.info(f"Writing file: {path}")
    target = ctx.resolve(path)

    def _write() -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    await asyncio.to_thread(_write)
    return f"Successfully wrote content to {path}"


async def list_directory(
    ctx: ExecutionContext,
    path: Annotated[str, Field(description="Directory to list")] = ".",
) -> str:
    """List the files and directories inside a directory."""
    ctx.logger.info(f"Listing directory: {path}")
    target = ctx.resolve(path)

    def _entries() -> list:
        if not target.exists():
            raise FileNotFoundError(f"No such directory: {path}")
        if not target.is_dir():
            raise NotADirectoryError(f"Not a directory: {path}")
        return sorted(target.iterdir(), key=lambda p: p.name)

    entries = await asyncio.to_thread(_entries)
    lines = [f"{'[DIR]' if entry.is_dir() else '[FILE]'} {entry.name}" for entry in entries]
    return "\n".join([f"Contents of {path}:"] + lines)


async def create_directory(
    ctx: ExecutionContext,
    path: Annotated[str, Field(description="Directory to create, including missing parents")],
) -> str:
    """Create a directory and any missing parent directories."""
    ctx.logger.info(f"Creating directory: {path}")
    await asyncio.to_thread(ctx.resolve(path).mkdir, parents=True, exist_ok=True)
    return f"Successfully created directory {path}"


async def move_file(
    ctx: ExecutionContext,
    source: Annotated[str, Field(description="Path of the file or directory to move")],
    destination: Annotated[str, Field(description="New path")],
) -> str:
    """Move or rename a file or directory."""
    ctx.logger.info(f"Moving {source} to {destination}")
    src = ctx.resolve(source)
    dest = ctx.resolve(destination)

    def _move() -> None:
        if not src.exists():
            raise FileNotFoundError(f"No such file or directory: {source}")
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(src), str(dest))

    await asyncio.to_thread(_move)
    return f"Successfully moved {source} to {destination}"


async def delete_file(
    ctx: ExecutionContext,
    path: Annotated[str, Field(description="Relative path of the file to delete")],
    confirm: Annotated[bool, Field(description="Confirmation that the file should be deleted")] = True,
) -> str:
    """Delete a file. Absolute paths and paths leaving the working directory are refused."""
    if _is_protected_path(path):
        ctx.logger.warning(f"Refusing to delete protected path: {path}")
        raise ToolValidationError(f"Cannot delete system path: {path}")
    if not confirm:
        raise ToolValidationError(f"Deletion of {path} was not confirmed")

    ctx.logger.info(f"Deleting file: {path}")
    await asyncio.to_thread(ctx.resolve(path).unlink)
    return f"Successfully deleted {path}"
