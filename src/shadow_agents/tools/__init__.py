"""Tool description, registration and dispatch layer.

This package provides parameter schemas (hand-built or generated from
pydantic models), the tool builder, the per-agent tool registry, and a small
set of built-in tools.
"""

from shadow_agents.tools.builtin import (
    builtin_tools,
    formatter_tool,
    math_tool,
    todo_verifier_tool,
)
from shadow_agents.tools.registry import ToolRegistry, decode_argument_blob
from shadow_agents.tools.schema import (
    Schema,
    SchemaKind,
    generate_schema,
    validate_arguments,
)
from shadow_agents.tools.types import Tool, ToolBuilder, ToolHandler, ToolSpec

__all__ = [
    # Schemas
    "Schema",
    "SchemaKind",
    "generate_schema",
    "validate_arguments",
    # Tools
    "Tool",
    "ToolBuilder",
    "ToolHandler",
    "ToolSpec",
    "ToolRegistry",
    "decode_argument_blob",
    # Built-ins
    "builtin_tools",
    "formatter_tool",
    "math_tool",
    "todo_verifier_tool",
]
