"""The built-in tool catalog executed on the user's machine."""

from ..models import ToolName
from ..registry import ToolRegistry
from .code_exec import execute_code
from .diff import diff_files
from .filesystem import create_directory, delete_file, list_directory, move_file, read_file, write_file
from .git import git_diff
from .search import find_files, grep_search
from .shell import run_command
from .work_context import get_work_context, set_work_context

BUILTIN_EXECUTORS = {
    ToolName.READ_FILE: read_file,
    ToolName.WRITE_FILE: write_file,
    ToolName.LIST_DIRECTORY: list_directory,
    ToolName.CREATE_DIRECTORY: create_directory,
    ToolName.MOVE_FILE: move_file,
    ToolName.DELETE_FILE: delete_file,
    ToolName.GREP_SEARCH: grep_search,
    ToolName.FIND_FILES: find_files,
    ToolName.EXECUTE_CODE: execute_code,
    ToolName.RUN_COMMAND: run_command,
    ToolName.DIFF_FILES: diff_files,
    ToolName.GIT_DIFF: git_diff,
    ToolName.SET_WORK_CONTEXT: set_work_context,
    ToolName.GET_WORK_CONTEXT: get_work_context,
}


def build_default_registry() -> ToolRegistry:
    """Build a registry holding an executor for every tool kind."""
    registry = ToolRegistry()
    for name, func in BUILTIN_EXECUTORS.items():
        registry.register(name, func)
    registry.assert_complete()
    return registry


__all__ = [
    "BUILTIN_EXECUTORS",
    "build_default_registry",
    "read_file",
    "write_file",
    "list_directory",
    "create_directory",
    "move_file",
    "delete_file",
    "grep_search",
    "find_files",
    "execute_code",
    "run_command",
    "diff_files",
    "git_diff",
    "set_work_context",
    "get_work_context",
]
