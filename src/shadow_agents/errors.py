"""Exception hierarchy for shadow-agents.

Errors fall into three groups:

- Run failures (``AgentRunError``): the conversation cannot continue and the
  error propagates out of ``Agent.run``.
- Tool failures (``ToolError``): recoverable. The conversation engine turns
  them into a tool-result payload carrying an ``error`` field and hands them
  back to the model.
- Configuration errors raised while describing tools, before any
  conversation starts.
"""

from typing import Any


class AgentError(Exception):
    """Base class for every error raised by shadow-agents."""


# --- Run failures ---


class AgentRunError(AgentError):
    """A conversation terminated without producing an answer."""


class TransportError(AgentRunError):
    """The model session failed to answer a message."""


class TurnLimitExceeded(AgentRunError):
    """The model kept requesting tools past the configured round-trip cap."""

    def __init__(self, agent_name: str, max_turns: int) -> None:
        self.agent_name = agent_name
        self.max_turns = max_turns
        super().__init__(
            f"Agent '{agent_name}' exceeded the limit of {max_turns} model turns"
        )


# --- Configuration errors ---


class UnsupportedFieldType(AgentError, TypeError):
    """A field cannot be expressed as a primitive schema property."""

    def __init__(self, model_name: str, field_name: str, annotation: Any) -> None:
        self.model_name = model_name
        self.field_name = field_name
        self.annotation = annotation
        super().__init__(
            f"Field '{field_name}' of {model_name} has unsupported type "
            f"{annotation!r}; only str, int, float and bool are supported"
        )


class IgnoredFieldRequired(AgentError, ValueError):
    """A field left out of the schema has no default to fall back on."""

    def __init__(self, model_name: str, field_name: str) -> None:
        self.model_name = model_name
        self.field_name = field_name
        super().__init__(
            f"Field '{field_name}' of {model_name} is excluded from the tool "
            f"schema and must have a default"
        )


# --- Tool failures ---


class ToolError(AgentError):
    """Recoverable failure while dispatching a tool call."""

    def to_payload(self) -> dict[str, Any]:
        """Render the error as a tool-result payload for the model."""
        return {"error": str(self)}


class UnknownTool(ToolError):
    """The model requested a tool that is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool '{name}' not found")


class ArgumentDecodeError(ToolError):
    """Tool-call arguments do not match the tool's parameter schema."""


class ToolExecutionError(ToolError):
    """The tool executor failed."""


class InvalidArgument(ToolError):
    """An executor rejected one of its arguments."""
