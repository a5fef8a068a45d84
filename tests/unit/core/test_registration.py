"""Unit tests for the RegistrationGate."""

import pytest

from shootout.core.loader import static_loader
from shootout.core.registration import RegistrationGate
from shootout.core.roster import RosterStore
from shootout.utils.errors import RecoveryAction, RegistrationClosedError


@pytest.fixture
def roster() -> RosterStore:
    return RosterStore(
        static_loader(
            [
                {"name": "John", "health": 10, "damage": 1},
                {"name": "Bill", "health": 8, "damage": 2},
                {"name": "Sam", "health": 10, "damage": 1},
            ]
        )
    )


def test_issues_identities_in_declaration_order(roster: RosterStore) -> None:
    gate = RegistrationGate()
    names = [gate.register(roster).name for _ in range(3)]
    assert names == ["John", "Bill", "Sam"]
    assert gate.registered == ("John", "Bill", "Sam")


def test_returns_full_record(roster: RosterStore) -> None:
    gate = RegistrationGate()
    participant = gate.register(roster)
    assert (participant.health, participant.damage) == (10, 1)


def test_is_full_only_after_every_name(roster: RosterStore) -> None:
    gate = RegistrationGate()
    for _ in range(2):
        gate.register(roster)
        assert not gate.is_full(roster)
    gate.register(roster)
    assert gate.is_full(roster)


def test_closed_once_full(roster: RosterStore) -> None:
    gate = RegistrationGate()
    for _ in range(3):
        gate.register(roster)

    with pytest.raises(RegistrationClosedError) as exc_info:
        gate.register(roster)

    assert exc_info.value.roster_size == 3
    assert exc_info.value.recovery_action == RecoveryAction.STOP
    assert len(gate) == 3


def test_never_exceeds_roster_or_duplicates(roster: RosterStore) -> None:
    gate = RegistrationGate()
    for _ in range(10):
        try:
            gate.register(roster)
        except RegistrationClosedError:
            pass
    assert len(gate) <= len(roster)
    assert len(set(gate.registered)) == len(gate.registered)


def test_reset_reopens_registration(roster: RosterStore) -> None:
    gate = RegistrationGate()
    for _ in range(3):
        gate.register(roster)

    gate.reset()

    assert len(gate) == 0
    assert gate.register(roster).name == "John"
