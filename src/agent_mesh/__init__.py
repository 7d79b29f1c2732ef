"""agent-mesh: Capability-based discovery and task delegation for agent meshes.

This package provides an agent registry, ranked discovery over advertised
capabilities and resource grants, and HTTP callback delegation with hop-depth
limits, exposed through a FastAPI server.
"""

from agent_mesh.app import create_app

__version__ = "0.1.0"

__all__ = ["create_app", "__version__"]
