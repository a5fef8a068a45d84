# Core coordinator components

from .coordinator import Coordinator
from .loader import RosterLoader, file_loader, load_roster, parse_roster, static_loader
from .registration import RegistrationGate
from .roster import RosterStore
from .selector import TargetSelector
from .shots import ShotPlan, ShotProcessor

__all__ = [
    "Coordinator",
    "RegistrationGate",
    "RosterLoader",
    "RosterStore",
    "ShotPlan",
    "ShotProcessor",
    "TargetSelector",
    "file_loader",
    "load_roster",
    "parse_roster",
    "static_loader",
]
