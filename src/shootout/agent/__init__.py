"""Cowboy agent: the client side of a shootout."""

from .client import CoordinatorClient
from .cowboy import AgentOutcome, CowboyAgent, run_agents, shoot

__all__ = [
    "AgentOutcome",
    "CoordinatorClient",
    "CowboyAgent",
    "run_agents",
    "shoot",
]
