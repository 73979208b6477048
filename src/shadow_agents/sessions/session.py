"""Model session boundary.

The conversation engine talks to a model exclusively through these two
protocols. Provider adapters (see ``shadow_agents.ollama``) implement them.
"""

from typing import Protocol, Sequence, runtime_checkable

from shadow_agents.sessions.types import ContentPart
from shadow_agents.tools.types import ToolSpec


@runtime_checkable
class ModelSession(Protocol):
    """One exchange channel with a model, scoped to a single agent run."""

    async def send(self, parts: Sequence[ContentPart]) -> list[ContentPart]:
        """Send one message and return the model's reply.

        Args:
            parts: The outgoing message (user text or a tool result)

        Returns:
            list[ContentPart]: The reply, possibly empty

        Raises:
            TransportError: If the model could not be reached or answered
                            with something unusable
        """
        ...


@runtime_checkable
class ModelBinding(Protocol):
    """A configured model that can open sessions."""

    @property
    def model_name(self) -> str:
        ...

    def start_session(
        self, system_prompt: str | None, tools: Sequence[ToolSpec]
    ) -> ModelSession:
        """Open a session that advertises ``tools`` to the model.

        The tool list is fixed for the lifetime of the session.
        """
        ...
