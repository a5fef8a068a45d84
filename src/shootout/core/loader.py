"""Static roster loading.

The roster file is a JSON (or YAML) list of participant records:

    [
        {"name": "John", "health": 10, "damage": 1, "is_alive": true},
        {"name": "Bill", "health": 8, "damage": 2, "is_alive": true}
    ]
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from shootout.schemas.models import Participant
from shootout.utils.errors import ConfigLoadError
from shootout.utils.telemetry import get_logger

RosterLoader = Callable[[], list[Participant]]

logger = get_logger("shootout.loader")


def parse_roster(records: Any, source: str = "<memory>") -> list[Participant]:
    """Validate raw roster records.

    Args:
        records: Decoded list of participant mappings
        source: Where the records came from, for error messages

    Returns:
        Participants in declaration order

    Raises:
        ConfigLoadError: If the records do not form a usable roster
    """
    if not isinstance(records, list):
        raise ConfigLoadError(source, "roster must be a list of participants")
    if not records:
        raise ConfigLoadError(source, "roster is empty")

    try:
        roster = [Participant.model_validate(record) for record in records]
    except ValidationError as e:
        raise ConfigLoadError(source, f"invalid participant record: {e}") from e

    seen: set[str] = set()
    for participant in roster:
        if participant.name in seen:
            raise ConfigLoadError(source, f"duplicate name {participant.name!r}")
        seen.add(participant.name)

    if not any(p.is_alive for p in roster):
        raise ConfigLoadError(source, "no participant is alive")

    return roster


def load_roster(path: Path | str) -> list[Participant]:
    """Read the roster from a JSON or YAML file.

    Args:
        path: Roster file location

    Returns:
        Participants in declaration order

    Raises:
        ConfigLoadError: If the file is missing, malformed or invalid
    """
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise ConfigLoadError(str(path), f"cannot read file: {e}") from e

    try:
        if path.suffix in (".yaml", ".yml"):
            records = yaml.safe_load(text)
        else:
            records = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigLoadError(str(path), f"cannot parse file: {e}") from e

    roster = parse_roster(records, str(path))
    logger.info(
        "Roster loaded",
        path=str(path),
        participants=[p.name for p in roster],
    )
    return roster


def file_loader(path: Path | str) -> RosterLoader:
    """Build a loader that re-reads ``path`` on every call."""

    def load() -> list[Participant]:
        return load_roster(path)

    return load


def static_loader(records: list[Participant] | list[dict[str, Any]]) -> RosterLoader:
    """Build a loader that hands out fresh copies of in-memory records."""
    template = parse_roster(
        [r.model_dump() if isinstance(r, Participant) else r for r in records]
    )

    def load() -> list[Participant]:
        return [p.model_copy() for p in template]

    return load
