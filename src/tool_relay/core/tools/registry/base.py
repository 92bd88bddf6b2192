"""Tool registry mapping tool names to their local executors."""

import inspect
from typing import Any, Callable, Dict, Iterable, List, Optional, Union, cast

from pydantic import ConfigDict, create_model

from ..models import ToolDefinition, ToolName
from ..schema import SchemaValidator, ToolParameterFactory
from ...exceptions import ToolNotFoundError, ToolRegistrationError, ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

# The first parameter of every executor receives the ExecutionContext and is not part of the tool schema.
_CONTEXT_PARAMS = {"self", "ctx", "context"}


class ToolRegistry:
    """
    A central registry of the tools the relay can execute locally.

    This class maps tool names to their async executors, together with the parameter
    models used to validate incoming arguments and the schemas advertised to the agent.
    """

    def __init__(self) -> None:
        """Initialize the ToolRegistry."""
        self.tools: Dict[str, ToolDefinition] = {}

    def register(
        self,
        name: Union[str, ToolName, ToolDefinition],
        func: Optional[Callable] = None,
        description: Optional[str] = None,
    ) -> None:
        """
        Register a tool executor.

        Args:
            name: The tool name, or a complete ``ToolDefinition``.
            func: The async executor, called as ``func(ctx, **params)``. Required unless a definition is given.
            description: What the tool does. Defaults to the executor's docstring.

        Raises:
            ToolRegistrationError: If ``func`` is missing or the tool already exists.
            ToolValidationError: If the executor lacks a docstring or parameter descriptions.
        """
        if isinstance(name, ToolDefinition):
            tool = name
        else:
            if func is None:
                raise ToolRegistrationError("If passing name as string, func is required.")
            tool_name = name.value if isinstance(name, ToolName) else name
            tool = self._generate_tool_definition(func, name=tool_name, description=description)

        if tool.name in self.tools:
            msg = f"Tool '{tool.name}' is already registered."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        self.tools[tool.name] = tool
        logger.debug("Registered tool '%s'", tool.name)

    def unregister(self, tool_name: str) -> None:
        """Unregister a tool from the registry.

        Args:
            tool_name: The name of the tool to remove.

        Raises:
            ToolNotFoundError: If the tool does not exist in the registry.
        """
        if tool_name in self.tools:
            del self.tools[tool_name]
            logger.info(f"Successfully unregistered tool: '{tool_name}'")
        else:
            raise ToolNotFoundError(f"Tool '{tool_name}' not found in the registry.")

    def tool(self, name: Union[str, ToolName]) -> Callable[[Callable], Callable]:
        """A decorator registering an async executor under ``name``.

        Args:
            name: The tool name.

        Returns:
            A decorator returning the original function after registering it.
        """

        def decorator(func: Callable) -> Callable:
            self.register(name, func)
            return func

        return decorator

    def get(self, tool_name: str) -> ToolDefinition:
        """Look up a tool definition.

        Raises:
            ToolNotFoundError: If the tool does not exist in the registry.
        """
        try:
            return self.tools[tool_name]
        except KeyError:
            raise ToolNotFoundError(f"Unknown tool: {tool_name}") from None

    def assert_complete(self, names: Iterable[Union[str, ToolName]] = ToolName) -> None:
        """Check that every tool kind has an executor.

        Raises:
            ToolRegistrationError: Listing the tool kinds without an executor.
        """
        missing = [n.value if isinstance(n, ToolName) else n for n in names]
        missing = [n for n in missing if n not in self.tools]
        if missing:
            raise ToolRegistrationError(f"No executor registered for: {', '.join(missing)}")

    @property
    def tool_schemas(self) -> List[Dict[str, Any]]:
        """The tool contract for the remote agent: name, description and parameter schema per tool."""
        return [
            {"name": tool.name, "description": tool.description, "parameters": tool.parameters or {}}
            for tool in self.tools.values()
        ]

    def _generate_tool_definition(
        self, func: Callable, name: str, description: Optional[str] = None
    ) -> ToolDefinition:
        """Generate a ToolDefinition from an executor.

        Args:
            func: The executor to generate a definition for.
            name: The tool name.
            description: Optional description override for the tool.

        Returns:
            A ToolDefinition object containing the tool's metadata and schema.

        Raises:
            ToolValidationError: If the executor is not async, or is missing a docstring or parameter descriptions.
        """
        if not inspect.iscoroutinefunction(func):
            raise ToolValidationError(f"Executor for tool '{name}' must be an async function.")

        if description is None:
            description = self._get_docstring_from_func(func, name)

        signature = inspect.signature(func, eval_str=True)
        fields = self._build_fields(signature, name)

        # create_model expects **field_definitions: Any
        args_model = create_model(
            f"{name}Params",
            __config__=ConfigDict(populate_by_name=True),
            **cast(Dict[str, Any], fields),
        )

        return ToolDefinition(
            name=name,
            description=description,
            func=func,
            parameters=SchemaValidator.schema_for(args_model),
            args_model=args_model,
        )

    @staticmethod
    def _get_docstring_from_func(func: Callable, tool_name: str) -> str:
        doc = inspect.getdoc(func)
        if not doc:
            msg = f"Tool '{tool_name}' missing docstring. The agent needs a description of what the tool does."
            logger.error(msg)
            raise ToolValidationError(msg)
        return doc.split("\n\n")[0].strip()

    @staticmethod
    def _build_fields(signature: inspect.Signature, tool_name: str) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        for index, (param_name, param) in enumerate(signature.parameters.items()):
            if index == 0 and param_name in _CONTEXT_PARAMS:
                continue
            ft = ToolParameterFactory.build_field_tuple(param_name=param_name, param=param, tool_name=tool_name)
            fields[param_name] = (ft.annotation, ft.field)
        return fields
