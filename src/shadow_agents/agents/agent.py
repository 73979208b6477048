"""Agent and conversation engine.

An ``Agent`` binds a model to a tool registry. ``Agent.run`` drives one
conversation to completion:

1. Open a session advertising every registered tool.
2. Send the prompt.
3. If the reply requests a tool, dispatch the first such request, send its
   result (or its error) back, and go to 3.
4. Otherwise return the reply's text.

Tool failures are reported to the model, which can retry or give up. Only a
failing model session or too many round trips abort the run.
"""

import logging
from typing import Sequence, assert_never

from pydantic import BaseModel, Field

from shadow_agents.agents.hierarchy import enter_call_chain, sub_agent_tool
from shadow_agents.errors import ToolError, TransportError, TurnLimitExceeded
from shadow_agents.sessions.session import ModelBinding, ModelSession
from shadow_agents.sessions.types import (
    ContentPart,
    TextPart,
    ToolCallPart,
    ToolResultPart,
)
from shadow_agents.tools.registry import ToolRegistry
from shadow_agents.tools.types import Tool, ToolSpec

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 10


class AgentConfig(BaseModel):
    """Static configuration for an agent.

    Attributes:
        name: Agent identity; also the basis of its tool name as a sub-agent
        description: What the agent does, shown to parent agents
        system_prompt: Instructions given to the model for every run
        max_turns: Maximum model round trips per run
    """

    name: str = Field(min_length=1)
    description: str = ""
    system_prompt: str | None = None
    max_turns: int = Field(default=DEFAULT_MAX_TURNS, ge=1)


def _split_response(
    agent_name: str, parts: Sequence[ContentPart]
) -> tuple[ToolCallPart | None, str]:
    """Find the first tool call in a reply and join its text parts."""
    tool_call: ToolCallPart | None = None
    texts: list[str] = []

    for part in parts:
        if isinstance(part, TextPart):
            texts.append(part.text)
        elif isinstance(part, ToolCallPart):
            if tool_call is None:
                tool_call = part
            else:
                logger.debug(
                    f"Agent '{agent_name}': ignoring extra tool call '{part.name}'"
                )
        elif isinstance(part, ToolResultPart):
            logger.warning(
                f"Agent '{agent_name}': model reply contained a tool result "
                f"for '{part.name}', ignoring it"
            )
        else:
            assert_never(part)

    return tool_call, "".join(texts)


class Agent:
    """A model plus the tools it may call.

    Register tools before the first ``run``; the registry is not safe to
    mutate while a run is in flight.
    """

    def __init__(
        self,
        name: str,
        binding: ModelBinding,
        *,
        description: str = "",
        system_prompt: str | None = None,
        max_turns: int = DEFAULT_MAX_TURNS,
        tools: Sequence[Tool] | None = None,
    ) -> None:
        """Initialize the agent.

        Args:
            name: Agent identity
            binding: The model this agent talks to
            description: What the agent does, shown to parent agents
            system_prompt: Instructions given to the model for every run
            max_turns: Maximum model round trips per run
            tools: Tools to register up front

        Raises:
            ValueError: If the name is blank or max_turns is below 1
        """
        if not name or not name.strip():
            raise ValueError("Agent name must not be empty")
        if max_turns < 1:
            raise ValueError("max_turns must be at least 1")

        self.name = name
        self.binding = binding
        self.description = description
        self.system_prompt = system_prompt
        self.max_turns = max_turns
        self.registry = ToolRegistry(list(tools or []))
        logger.debug(f"Created agent '{name}' on model {binding.model_name}")

    @classmethod
    def from_config(
        cls,
        config: AgentConfig,
        binding: ModelBinding,
        tools: Sequence[Tool] | None = None,
    ) -> "Agent":
        return cls(
            config.name,
            binding,
            description=config.description,
            system_prompt=config.system_prompt,
            max_turns=config.max_turns,
            tools=tools,
        )

    def __repr__(self) -> str:
        return f"Agent(name={self.name!r}, tools={self.registry.names()!r})"

    @property
    def tool_specs(self) -> list[ToolSpec]:
        return self.registry.list_specs()

    def register_tools(self, *tools: Tool) -> "Agent":
        """Add tools to this agent, replacing same-named ones."""
        for tool in tools:
            self.registry.register(tool)
        logger.info(f"Registered {len(tools)} tools to agent '{self.name}'")
        return self

    def register_sub_agents(self, *agents: "Agent") -> "Agent":
        """Expose other agents as tools of this agent.

        Raises:
            ValueError: If an agent is registered on itself
        """
        for agent in agents:
            if agent is self:
                raise ValueError(f"Agent '{self.name}' cannot be its own sub-agent")
        return self.register_tools(*(agent.as_tool() for agent in agents))

    def as_tool(self) -> Tool:
        """Wrap this agent as a tool taking a single ``prompt`` argument."""
        return sub_agent_tool(self)

    async def run(self, prompt: str) -> str:
        """Run a conversation for ``prompt`` until the model answers.

        Args:
            prompt: The user's goal

        Returns:
            str: The model's final text, possibly empty

        Raises:
            TransportError: If the model session fails
            TurnLimitExceeded: If the model still requests tools after
                               ``max_turns`` round trips
        """
        with enter_call_chain(self):
            session = self.binding.start_session(self.system_prompt, self.tool_specs)
            logger.info(
                f"Agent '{self.name}' starting run with {len(self.registry)} tools"
            )

            outgoing: list[ContentPart] = [TextPart(text=prompt)]
            turns = 0
            while True:
                response = await self._send(session, outgoing)
                turns += 1

                tool_call, text = _split_response(self.name, response)
                if tool_call is None:
                    logger.info(
                        f"Agent '{self.name}' finished after {turns} turns "
                        f"({len(text)} chars)"
                    )
                    return text

                if turns >= self.max_turns:
                    logger.error(
                        f"Agent '{self.name}' hit the turn limit ({self.max_turns}) "
                        f"with pending tool call '{tool_call.name}'"
                    )
                    raise TurnLimitExceeded(self.name, self.max_turns)

                result = await self._dispatch(tool_call)
                outgoing = [ToolResultPart(name=tool_call.name, result=result)]

    async def _send(
        self, session: ModelSession, parts: list[ContentPart]
    ) -> list[ContentPart]:
        try:
            return await session.send(parts)
        except TransportError as e:
            logger.error(f"Agent '{self.name}': model session failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Agent '{self.name}': model session failed: {e}")
            raise TransportError(f"Failed to get model response: {e}") from e

    async def _dispatch(self, tool_call: ToolCallPart) -> dict:
        logger.debug(f"Agent '{self.name}' dispatching tool '{tool_call.name}'")
        try:
            return await self.registry.dispatch(tool_call.name, tool_call.arguments)
        except ToolError as e:
            logger.warning(
                f"Agent '{self.name}': tool '{tool_call.name}' failed "
                f"({type(e).__name__}): {e}"
            )
            return e.to_payload()
