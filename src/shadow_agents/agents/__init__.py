"""Agent construction, execution and orchestration layer.

This package provides the ``Agent`` conversation engine, helpers for exposing
agents as tools of other agents, and the factory that builds the agents
served over HTTP.
"""

from shadow_agents.agents.agent import DEFAULT_MAX_TURNS, Agent, AgentConfig
from shadow_agents.agents.hierarchy import (
    active_call_chain,
    sanitize_tool_name,
    sub_agent_tool,
)

__all__ = [
    "Agent",
    "AgentConfig",
    "DEFAULT_MAX_TURNS",
    "active_call_chain",
    "sanitize_tool_name",
    "sub_agent_tool",
]
