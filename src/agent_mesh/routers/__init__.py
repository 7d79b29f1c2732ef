"""API routers for agent-mesh endpoints.

This package contains FastAPI router modules for the health, agent
registry, discovery and delegation endpoints.
"""

from agent_mesh.routers import agents, delegations, discovery, health

__all__ = ["agents", "delegations", "discovery", "health"]
