"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings and agents.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from shadow_agents.agents import Agent
from shadow_agents.config import ShadowAgentsSettings


@lru_cache
def get_settings() -> ShadowAgentsSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the SHADOW_ prefix.

    Returns:
        ShadowAgentsSettings: The application configuration settings.
    """
    return ShadowAgentsSettings()


def get_agents(request: Request) -> dict[str, Agent]:
    """Get the agents built at startup, keyed by name.

    Raises:
        HTTPException: If the agents are not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "agents"):
        raise HTTPException(
            status_code=503,
            detail="Agents not initialized",
        )
    return request.app.state.agents


def get_agent(agent_name: str, request: Request) -> Agent:
    """Resolve the agent named in the request path.

    Raises:
        HTTPException: 404 if no agent has that name.
    """
    agents = get_agents(request)
    agent = agents.get(agent_name)
    if agent is None:
        raise HTTPException(
            status_code=404,
            detail={
                "error": {
                    "code": "agent_not_found",
                    "message": f"Agent {agent_name} not found",
                    "details": {"agent_name": agent_name},
                }
            },
        )
    return agent
