"""shootout - Multiplayer shootout coordinator.

Cowboy agents register with a central coordinator, poll it for a living
opponent, report the damage they dealt, and keep shooting until exactly one
of them is left standing. The coordinator then declares the winner and
reloads the roster for the next round.
"""

__version__ = "0.1.0"

from .core import (
    Coordinator,
    RegistrationGate,
    RosterStore,
    ShotProcessor,
    TargetSelector,
    file_loader,
    load_roster,
    static_loader,
)
from .schemas import Participant, RoundState, ShotReport, Winner

__all__ = [
    "Coordinator",
    "Participant",
    "RegistrationGate",
    "RosterStore",
    "RoundState",
    "ShotProcessor",
    "ShotReport",
    "TargetSelector",
    "Winner",
    "__version__",
    "file_loader",
    "load_roster",
    "static_loader",
]
