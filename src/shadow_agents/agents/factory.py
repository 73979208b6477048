"""Agent factories for the HTTP server.

The server builds its agents once at startup by calling a factory with the
model binding and the settings. A custom factory is named by an import path
``"package.module:function"``; without one, a single assistant with the
built-in tools is served.
"""

import importlib
import logging
from typing import TYPE_CHECKING, Callable, Iterable

from shadow_agents.agents.agent import Agent
from shadow_agents.sessions.session import ModelBinding
from shadow_agents.tools.builtin import builtin_tools

if TYPE_CHECKING:
    from shadow_agents.config import ShadowAgentsSettings

logger = logging.getLogger(__name__)

AgentFactory = Callable[[ModelBinding, "ShadowAgentsSettings"], Iterable[Agent]]


def default_agents(
    binding: ModelBinding, settings: "ShadowAgentsSettings"
) -> list[Agent]:
    """Build the default assistant agent with the built-in tools."""
    assistant = Agent(
        settings.default_agent_name,
        binding,
        description="General purpose assistant",
        system_prompt=settings.default_system_prompt,
        max_turns=settings.max_turns,
    )
    assistant.register_tools(*builtin_tools())
    return [assistant]


def load_agent_factory(path: str) -> AgentFactory:
    """Import an agent factory from a ``"module:function"`` path.

    Raises:
        ValueError: If the path is malformed or does not name a callable
        ImportError: If the module cannot be imported
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(
            f"Invalid agent factory '{path}', expected 'module:function'"
        )

    module = importlib.import_module(module_name)
    factory = getattr(module, attr, None)
    if not callable(factory):
        raise ValueError(f"Agent factory '{path}' is not callable")
    return factory


def build_agents(
    binding: ModelBinding, settings: "ShadowAgentsSettings"
) -> dict[str, Agent]:
    """Build the agents served by the application, keyed by name.

    Raises:
        ValueError: If the factory yields two agents with the same name
    """
    factory: AgentFactory = default_agents
    if settings.agents_factory:
        factory = load_agent_factory(settings.agents_factory)
        logger.info(f"Using agent factory: {settings.agents_factory}")

    agents: dict[str, Agent] = {}
    for agent in factory(binding, settings):
        if agent.name in agents:
            raise ValueError(f"Duplicate agent name: {agent.name}")
        agents[agent.name] = agent

    logger.info(f"Built {len(agents)} agents: {', '.join(agents)}")
    return agents
