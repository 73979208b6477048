"""Content parts exchanged with a model session.

A message sent to or received from the model is a list of content parts.
Each part is exactly one of the three variants below; consumers dispatch on
the variant with ``isinstance`` and must handle all three.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TextPart:
    """Plain text, either the user's prompt or the model's answer."""

    text: str = ""


@dataclass(frozen=True)
class ToolCallPart:
    """A request from the model to invoke a tool.

    ``arguments`` is either an already-decoded mapping or the JSON text the
    provider delivered.
    """

    name: str
    arguments: dict[str, Any] | str = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResultPart:
    """The outcome of a tool call, sent back to the model.

    Failed calls carry a mapping with an ``error`` field.
    """

    name: str
    result: dict[str, Any] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return "error" in self.result


# Union type for all content parts
ContentPart = TextPart | ToolCallPart | ToolResultPart
