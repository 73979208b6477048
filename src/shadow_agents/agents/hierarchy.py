"""Sub-agents exposed as tools.

A child agent is wrapped as a tool taking a single ``prompt`` argument. When
the parent's model calls that tool, the child runs its own conversation to
completion and its final answer is returned as ``{"result": answer}``.

Every running agent is pushed onto a per-task call chain. A sub-agent call
that would re-enter an agent already on the chain is refused, so a cyclic
agent graph fails one tool call instead of recursing forever.
"""

import logging
import re
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Iterator

from shadow_agents.errors import AgentRunError, InvalidArgument, ToolExecutionError
from shadow_agents.tools.schema import Schema
from shadow_agents.tools.types import Tool, ToolSpec

if TYPE_CHECKING:
    from shadow_agents.agents.agent import Agent

logger = logging.getLogger(__name__)

_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.\-]")

SUB_AGENT_SCHEMA = Schema.object(
    properties={
        "prompt": Schema.string("The request to hand to the agent"),
    },
    required=["prompt"],
)

_call_chain: ContextVar[tuple["Agent", ...]] = ContextVar(
    "shadow_agents_call_chain", default=()
)


def sanitize_tool_name(name: str) -> str:
    """Turn an agent name into a valid tool name.

    Every character other than ASCII letters, digits, ``_``, ``.`` and ``-``
    is replaced by an underscore, e.g. ``"Weather Agent"`` becomes
    ``"Weather_Agent"``.
    """
    return _INVALID_NAME_CHARS.sub("_", name)


def active_call_chain() -> tuple[str, ...]:
    """Names of the agents currently running in this task, outermost first."""
    return tuple(agent.name for agent in _call_chain.get())


def is_running(agent: "Agent") -> bool:
    return any(active is agent for active in _call_chain.get())


@contextmanager
def enter_call_chain(agent: "Agent") -> Iterator[None]:
    """Mark ``agent`` as running for the duration of the block."""
    token = _call_chain.set(_call_chain.get() + (agent,))
    try:
        yield
    finally:
        _call_chain.reset(token)


def sub_agent_tool(child: "Agent") -> Tool:
    """Wrap an agent as a tool for another agent.

    Args:
        child: The agent to delegate to

    Returns:
        Tool: A tool named after the child, taking one ``prompt`` argument
    """
    details = child.description or child.system_prompt or ""
    description = f"Asks the {child.name} agent to perform its function. {details}"

    async def run_child(arguments: dict[str, Any]) -> dict[str, str]:
        prompt = arguments.get("prompt")
        if not isinstance(prompt, str):
            raise InvalidArgument("Missing or invalid 'prompt' argument for sub-agent")

        if is_running(child):
            chain = " -> ".join(active_call_chain())
            raise ToolExecutionError(
                f"Agent '{child.name}' is already running in this call chain ({chain})"
            )

        logger.info(f"Calling sub-agent '{child.name}' with prompt: '{prompt}'")
        try:
            response = await child.run(prompt)
        except AgentRunError as e:
            raise ToolExecutionError(f"Sub-agent '{child.name}' run failed: {e}") from e

        return {"result": response}

    spec = ToolSpec(
        name=sanitize_tool_name(child.name),
        description=description.strip(),
        parameters=SUB_AGENT_SCHEMA,
    )
    # The handler validates ``prompt`` itself.
    return Tool(spec=spec, handler=run_child, decoder=dict)
