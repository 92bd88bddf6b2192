from enum import Enum
from typing import Optional, Any, Callable, Type, Dict

from pydantic import BaseModel


class ToolName(str, Enum):
    """The closed set of tool kinds the relay can execute."""

    READ_FILE = "read_file"
    WRITE_FILE = "write_file"
    LIST_DIRECTORY = "list_directory"
    CREATE_DIRECTORY = "create_directory"
    MOVE_FILE = "move_file"
    DELETE_FILE = "delete_file"
    GREP_SEARCH = "grep_search"
    FIND_FILES = "find_files"
    EXECUTE_CODE = "execute_code"
    RUN_COMMAND = "run_command"
    DIFF_FILES = "diff_files"
    GIT_DIFF = "git_diff"
    SET_WORK_CONTEXT = "set_work_context"
    GET_WORK_CONTEXT = "get_work_context"

    @classmethod
    def parse(cls, name: str) -> Optional["ToolName"]:
        """Return the member for ``name``, or None if the name is not a known tool."""
        try:
            return cls(name)
        except ValueError:
            return None


class ToolDefinition(BaseModel):
    """
    Represents the definition of a locally executable tool.

    Attributes:
        name: The unique name of the tool.
        description: A brief description of what the tool does.
        func: The async executor implementing the tool. Called as ``func(ctx, **params)``.
        parameters: JSON schema of the tool's parameters, as advertised to the remote agent.
        args_model: Pydantic model used for validating and coercing arguments.
    """

    name: str
    description: str
    func: Callable
    parameters: Optional[Dict[str, Any]] = None
    args_model: Optional[Type[BaseModel]] = None
