"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
Each router module defines endpoints for a specific domain (health, agents).
"""

from shadow_agents.routers import agents, health

__all__ = [
    "agents",
    "health",
]
