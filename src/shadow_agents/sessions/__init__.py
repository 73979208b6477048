"""Model session boundary for shadow-agents.

This package defines the content parts exchanged with a model and the
protocols an adapter must implement to drive a conversation.
"""

from shadow_agents.sessions.session import ModelBinding, ModelSession
from shadow_agents.sessions.types import (
    ContentPart,
    TextPart,
    ToolCallPart,
    ToolResultPart,
)

__all__ = [
    # Protocols
    "ModelBinding",
    "ModelSession",
    # Content parts
    "ContentPart",
    "TextPart",
    "ToolCallPart",
    "ToolResultPart",
]
