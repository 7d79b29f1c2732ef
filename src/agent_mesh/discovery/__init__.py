"""Agent discovery for agent-mesh.

This package provides resource grant matching, the token-overlap
DiscoveryEngine and the pluggable discovery providers built on it.
"""

from agent_mesh.discovery.engine import (
    DEFAULT_RESOURCE_BOOST,
    DiscoveryEngine,
    DiscoveryResult,
    ResourceRequirement,
    tokenize,
)
from agent_mesh.discovery.matcher import matches
from agent_mesh.discovery.providers import (
    DiscoveryProvider,
    LocalDiscoveryProvider,
    RemoteDiscoveryProvider,
)

__all__ = [
    "DEFAULT_RESOURCE_BOOST",
    "DiscoveryEngine",
    "DiscoveryProvider",
    "DiscoveryResult",
    "LocalDiscoveryProvider",
    "RemoteDiscoveryProvider",
    "ResourceRequirement",
    "matches",
    "tokenize",
]
