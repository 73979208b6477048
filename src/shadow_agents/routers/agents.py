"""Agent API endpoints.

This module provides endpoints for listing the served agents, inspecting
the tools each one advertises, and running an agent on a prompt.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from shadow_agents.agents import Agent
from shadow_agents.dependencies import get_agent, get_agents
from shadow_agents.errors import TransportError, TurnLimitExceeded
from shadow_agents.models.agents import (
    AgentListResponse,
    AgentSummary,
    RunAgentRequest,
    RunAgentResponse,
    ToolDefinitionResponse,
    ToolListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/agents", tags=["agents"])


@router.get("", response_model=AgentListResponse)
async def list_agents(
    agents: dict[str, Agent] = Depends(get_agents),
) -> AgentListResponse:
    """List all agents with their registered tools."""
    return AgentListResponse(
        agents=[
            AgentSummary(
                name=agent.name,
                description=agent.description,
                model=agent.binding.model_name,
                max_turns=agent.max_turns,
                tools=agent.registry.names(),
            )
            for agent in agents.values()
        ]
    )


@router.get("/{agent_name}/tools", response_model=ToolListResponse)
async def list_agent_tools(agent: Agent = Depends(get_agent)) -> ToolListResponse:
    """List the tool definitions an agent advertises to its model.

    Raises:
        HTTPException: 404 if the agent does not exist
    """
    return ToolListResponse(
        agent=agent.name,
        tools=[
            ToolDefinitionResponse(**spec.to_function_definition())
            for spec in agent.tool_specs
        ],
    )


@router.post("/{agent_name}/run", response_model=RunAgentResponse)
async def run_agent(
    request_body: RunAgentRequest,
    agent: Agent = Depends(get_agent),
) -> RunAgentResponse:
    """Run an agent on a prompt and return its final answer.

    Tool failures during the run are handled inside the conversation and
    never surface here.

    Args:
        request_body: The prompt to run
        agent: The agent named in the path

    Returns:
        RunAgentResponse with the agent's final text

    Raises:
        HTTPException: 404 if the agent does not exist, 502 if the model
                       could not be reached, 500 if the turn limit was hit
    """
    logger.info(f"Running agent {agent.name}")

    try:
        result = await agent.run(request_body.prompt)
    except TransportError as e:
        raise HTTPException(
            status_code=502,
            detail={
                "error": {
                    "code": "model_error",
                    "message": f"Failed to get response from model: {str(e)}",
                    "details": {"agent_name": agent.name},
                }
            },
        )
    except TurnLimitExceeded as e:
        raise HTTPException(
            status_code=500,
            detail={
                "error": {
                    "code": "turn_limit_exceeded",
                    "message": str(e),
                    "details": {
                        "agent_name": agent.name,
                        "max_turns": e.max_turns,
                    },
                }
            },
        )

    return RunAgentResponse(agent=agent.name, result=result)
