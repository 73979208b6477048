"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from shadow_agents.models.agents import (
    AgentListResponse,
    AgentSummary,
    RunAgentRequest,
    RunAgentResponse,
    ToolDefinitionResponse,
    ToolListResponse,
)
from shadow_agents.models.health import HealthResponse

__all__ = [
    "AgentListResponse",
    "AgentSummary",
    "HealthResponse",
    "RunAgentRequest",
    "RunAgentResponse",
    "ToolDefinitionResponse",
    "ToolListResponse",
]
