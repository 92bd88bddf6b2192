"""Tool-related data models."""

from .models import ToolDefinition, ToolName

__all__ = ["ToolDefinition", "ToolName"]
