"""Pydantic models for agent API requests and responses.

This module defines the request and response schemas for the
/api/v1/agents endpoints.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AgentSummary(BaseModel):
    """Summary of an agent served by the application."""

    name: str = Field(description="Agent name")
    description: str = Field(default="", description="What the agent does")
    model: str = Field(description="Model the agent talks to")
    max_turns: int = Field(description="Maximum model round trips per run")
    tools: list[str] = Field(
        default_factory=list,
        description="Names of the tools registered on the agent",
    )


class AgentListResponse(BaseModel):
    """Response body for GET /api/v1/agents."""

    agents: list[AgentSummary] = Field(description="Available agents")


class ToolDefinitionResponse(BaseModel):
    """A tool as advertised to the model.

    Attributes:
        name: Tool name used by the model
        description: Tool description
        parameters: JSON Schema of the tool arguments
    """

    name: str = Field(description="Tool name")
    description: str = Field(default="", description="Tool description")
    parameters: dict[str, Any] = Field(
        description="JSON Schema describing the tool arguments"
    )


class ToolListResponse(BaseModel):
    """Response body for GET /api/v1/agents/{agent_name}/tools."""

    agent: str = Field(description="Agent name")
    tools: list[ToolDefinitionResponse] = Field(
        description="Tools in registration order"
    )


class RunAgentRequest(BaseModel):
    """Request body for POST /api/v1/agents/{agent_name}/run."""

    prompt: str = Field(description="The goal to hand to the agent")

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"prompt": "What is 17 multiplied by 23?"},
            ]
        }
    )


class RunAgentResponse(BaseModel):
    """Response body for POST /api/v1/agents/{agent_name}/run.

    ``result`` is the agent's final answer; an empty string means the model
    gave no answer, not that the run failed.
    """

    agent: str = Field(description="Agent name")
    result: str = Field(description="The agent's final text answer")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "agent": "Assistant",
                "result": "17 multiplied by 23 is 391.",
            }
        }
    )
