"""shadow-agents: tool-using LLM agents with hierarchical delegation.

This package provides a conversation engine that lets a model call
schema-described tools (including other agents), an Ollama adapter for the
model side, and a FastAPI server exposing the configured agents.
"""

__version__ = "0.1.0"

from shadow_agents.agents import Agent, AgentConfig, sub_agent_tool
from shadow_agents.app import create_app
from shadow_agents.tools import Schema, Tool, ToolBuilder, ToolRegistry, ToolSpec

__all__ = [
    "Agent",
    "AgentConfig",
    "Schema",
    "Tool",
    "ToolBuilder",
    "ToolRegistry",
    "ToolSpec",
    "create_app",
    "sub_agent_tool",
    "__version__",
]
