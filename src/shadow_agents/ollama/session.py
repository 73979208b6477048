"""Ollama implementation of the model session boundary.

``OllamaModelBinding`` pairs an ``OllamaClient`` with a model name and
options. Each ``start_session`` call returns an ``OllamaChatSession`` that
keeps the message history of one agent run and translates content parts
to and from Ollama's chat message format.
"""

import json
import logging
from typing import Any, Sequence, assert_never

from shadow_agents.errors import TransportError
from shadow_agents.ollama.client import OllamaClient
from shadow_agents.sessions.types import (
    ContentPart,
    TextPart,
    ToolCallPart,
    ToolResultPart,
)
from shadow_agents.tools.types import ToolSpec

logger = logging.getLogger(__name__)


def tool_to_ollama(spec: ToolSpec) -> dict[str, Any]:
    """Convert a tool spec to an Ollama function tool declaration."""
    return {"type": "function", "function": spec.to_function_definition()}


def part_to_message(part: ContentPart) -> dict[str, Any]:
    """Convert an outgoing content part to an Ollama message dict."""
    if isinstance(part, TextPart):
        return {"role": "user", "content": part.text}
    elif isinstance(part, ToolResultPart):
        return {
            "role": "tool",
            "tool_name": part.name,
            "content": json.dumps(part.result, ensure_ascii=False, default=str),
        }
    elif isinstance(part, ToolCallPart):
        # Only used when replaying history into a fresh session
        return {
            "role": "assistant",
            "content": "",
            "tool_calls": [
                {"function": {"name": part.name, "arguments": part.arguments}}
            ],
        }
    else:
        assert_never(part)


def message_to_parts(message: dict[str, Any]) -> list[ContentPart]:
    """Convert an Ollama assistant message to content parts.

    Text comes first, followed by tool calls in the order the model made them.
    """
    parts: list[ContentPart] = []

    content = message.get("content") or ""
    if content:
        parts.append(TextPart(text=content))

    for tool_call in message.get("tool_calls") or []:
        function = tool_call.get("function") or {}
        name = function.get("name")
        if not name:
            logger.warning(f"Skipping tool call without a name: {tool_call}")
            continue
        arguments = function.get("arguments")
        parts.append(
            ToolCallPart(name=name, arguments=arguments if arguments is not None else {})
        )

    return parts


class OllamaChatSession:
    """Message history of one conversation with an Ollama model."""

    def __init__(
        self,
        client: OllamaClient,
        model: str,
        system_prompt: str | None = None,
        tools: Sequence[ToolSpec] = (),
        options: dict[str, Any] | None = None,
    ) -> None:
        self.client = client
        self.model = model
        self.options = options
        self.tools = [tool_to_ollama(spec) for spec in tools]
        self.messages: list[dict[str, Any]] = []
        if system_prompt:
            self.messages.append({"role": "system", "content": system_prompt})

    async def send(self, parts: Sequence[ContentPart]) -> list[ContentPart]:
        """Append ``parts`` to the history and ask the model for a reply.

        Raises:
            TransportError: If the request fails or the reply has no message
        """
        self.messages.extend(part_to_message(part) for part in parts)

        try:
            response = await self.client.chat(
                model=self.model,
                messages=self.messages,
                tools=self.tools,
                options=self.options,
            )
        except Exception as e:
            raise TransportError(f"Ollama request to {self.model} failed: {e}") from e

        message = response.get("message")
        if not isinstance(message, dict):
            raise TransportError(f"Ollama response from {self.model} has no message")

        assistant_message: dict[str, Any] = {
            "role": "assistant",
            "content": message.get("content") or "",
        }
        if message.get("tool_calls"):
            assistant_message["tool_calls"] = message["tool_calls"]
        self.messages.append(assistant_message)

        return message_to_parts(message)


class OllamaModelBinding:
    """An Ollama model that agents can open sessions on.

    Attributes:
        client: The shared Ollama client (owned by the caller)
        model: Model name, e.g. "llama3.2:latest"
        options: Model parameters passed on every request
    """

    def __init__(
        self,
        client: OllamaClient,
        model: str,
        options: dict[str, Any] | None = None,
    ) -> None:
        self.client = client
        self.model = model
        self.options = options

    @property
    def model_name(self) -> str:
        return self.model

    def start_session(
        self, system_prompt: str | None, tools: Sequence[ToolSpec]
    ) -> OllamaChatSession:
        logger.debug(f"Starting Ollama session on {self.model} with {len(tools)} tools")
        return OllamaChatSession(
            client=self.client,
            model=self.model,
            system_prompt=system_prompt,
            tools=tools,
            options=self.options,
        )
