"""Tool registry and dispatch."""

import json
import logging
from typing import Any, Iterator

from shadow_agents.errors import ArgumentDecodeError, UnknownTool
from shadow_agents.tools.types import Tool, ToolSpec

logger = logging.getLogger(__name__)


def decode_argument_blob(arguments: dict[str, Any] | str | None) -> dict[str, Any]:
    """Turn a tool-call argument payload into a mapping.

    Providers deliver arguments either already decoded or as JSON text.

    Raises:
        ArgumentDecodeError: If the text is not JSON or not a JSON object
    """
    if arguments is None:
        return {}
    if isinstance(arguments, str):
        if not arguments.strip():
            return {}
        try:
            arguments = json.loads(arguments)
        except json.JSONDecodeError as e:
            raise ArgumentDecodeError(f"Arguments are not valid JSON: {e}") from e
    if not isinstance(arguments, dict):
        raise ArgumentDecodeError(
            f"Arguments must be a JSON object, got {type(arguments).__name__}"
        )
    return arguments


class ToolRegistry:
    """Tools available to one agent, keyed by name.

    Registration order is preserved so the tool menu sent to the model is
    stable. The registry is not synchronised: finish registering before the
    first run.
    """

    def __init__(self, tools: list[Tool] | None = None) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """Insert a tool, replacing any tool of the same name."""
        if tool.name in self._tools:
            logger.info(f"Replacing tool: {tool.name}")
        else:
            logger.debug(f"Registered tool: {tool.name}")
        self._tools[tool.name] = tool

    def lookup(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def list_specs(self) -> list[ToolSpec]:
        """Return the specs of all tools in registration order."""
        return [tool.spec for tool in self._tools.values()]

    def names(self) -> list[str]:
        return list(self._tools.keys())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(list(self._tools.values()))

    async def dispatch(
        self, name: str, arguments: dict[str, Any] | str | None
    ) -> dict[str, Any]:
        """Decode arguments for a tool call and execute it.

        Args:
            name: Name of the requested tool
            arguments: Raw argument payload from the model

        Returns:
            dict: The tool result

        Raises:
            UnknownTool: If no tool is registered under ``name``
            ArgumentDecodeError: If the arguments do not fit the tool's schema
            ToolExecutionError: If the tool fails while running
            InvalidArgument: If the tool rejects an argument
        """
        tool = self.lookup(name)
        if tool is None:
            raise UnknownTool(name)

        decoded = tool.decode(decode_argument_blob(arguments))
        logger.debug(f"Executing tool '{name}'")
        return await tool.execute(decoded)
