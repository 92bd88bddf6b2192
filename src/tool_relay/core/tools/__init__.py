from .models import ToolDefinition, ToolName
from .registry import ToolRegistry
from .execution import ToolProxy, CompletedCommand, run_subprocess
from .schema import SchemaValidator
from .builtin import build_default_registry

__all__ = [
    "ToolDefinition",
    "ToolName",
    "ToolRegistry",
    "ToolProxy",
    "CompletedCommand",
    "run_subprocess",
    "SchemaValidator",
    "build_default_registry",
]
