"""Unit tests for the RosterStore."""

import pytest

from shootout.core.loader import static_loader
from shootout.core.roster import RosterStore
from shootout.utils.errors import ConfigLoadError, UnknownParticipantError


@pytest.fixture
def roster() -> RosterStore:
    return RosterStore(
        static_loader(
            [
                {"name": "A", "health": 10, "damage": 1, "is_alive": True},
                {"name": "B", "health": 8, "damage": 2, "is_alive": True},
                {"name": "C", "health": 0, "damage": 3, "is_alive": False},
            ]
        )
    )


class TestRosterReads:
    """Test read access to the roster."""

    def test_loads_on_construction(self, roster: RosterStore) -> None:
        assert len(roster) == 3
        assert roster.names == ["A", "B", "C"]

    def test_constructor_propagates_load_failure(self) -> None:
        def failing_loader():
            raise ConfigLoadError("memory", "boom")

        with pytest.raises(ConfigLoadError):
            RosterStore(failing_loader)

    def test_list_alive(self, roster: RosterStore) -> None:
        assert [p.name for p in roster.list_alive()] == ["A", "B"]

    def test_list_alive_excluding(self, roster: RosterStore) -> None:
        assert [p.name for p in roster.list_alive(excluding="A")] == ["B"]

    def test_count_alive(self, roster: RosterStore) -> None:
        assert roster.count_alive() == 2

    def test_get_unknown(self, roster: RosterStore) -> None:
        with pytest.raises(UnknownParticipantError):
            roster.get("Z")

    def test_readers_receive_copies(self, roster: RosterStore) -> None:
        copy = roster.get("A")
        copy.health = 1
        roster.list_alive()[0].health = 2
        roster.snapshot()[0].health = 3

        assert roster.get("A").health == 10


class TestRosterMutation:
    """Test shot application and reload."""

    def test_apply_shot_result(self, roster: RosterStore) -> None:
        roster.apply_shot_result("B", 3, True)
        assert roster.get("B").health == 3
        assert roster.count_alive() == 2

    def test_apply_killing_shot(self, roster: RosterStore) -> None:
        roster.apply_shot_result("B", 0, False)
        b = roster.get("B")
        assert (b.health, b.is_alive) == (0, False)
        assert roster.count_alive() == 1

    def test_apply_unknown(self, roster: RosterStore) -> None:
        with pytest.raises(UnknownParticipantError):
            roster.apply_shot_result("Z", 3, True)

    def test_apply_rejects_inconsistent_pair(self, roster: RosterStore) -> None:
        with pytest.raises(ValueError):
            roster.apply_shot_result("B", 0, True)
        assert roster.get("B").health == 8

    def test_reload_restores_static_roster(self, roster: RosterStore) -> None:
        roster.apply_shot_result("A", 0, False)
        roster.reload()
        assert roster.get("A").health == 10
        assert roster.count_alive() == 2

    def test_install_copies_records(self, roster: RosterStore) -> None:
        fresh = roster.load()
        roster.install(fresh)
        fresh[0].health = 1
        assert roster.get("A").health == 10
