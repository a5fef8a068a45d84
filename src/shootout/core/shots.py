"""Application of reported shot outcomes to the roster."""

from dataclasses import dataclass

from shootout.core.roster import RosterStore
from shootout.schemas.models import Participant, ShotReport, Winner
from shootout.utils.errors import (
    NoSurvivorError,
    StaleShotError,
    UnknownParticipantError,
)


@dataclass(frozen=True)
class ShotPlan:
    """Validated effect of a shot report, computed before any mutation."""

    report: ShotReport
    index: int
    alive_after: int
    survivor_index: int | None
    killed: bool

    @property
    def concludes_round(self) -> bool:
        return self.alive_after == 1


class ShotProcessor:
    """Validates and applies shot reports.

    Reports are trusted: the coordinator writes the health and alive flag the
    shooting agent computed and never recomputes damage itself. The only
    checks are consistency checks that keep the roster invariants intact.
    """

    def plan(self, report: ShotReport, roster: RosterStore) -> ShotPlan:
        """Locate the target and count survivors after the shot in one pass.

        Raises:
            UnknownParticipantError: If ``report.name`` is not in the roster
            StaleShotError: If the report would raise the target's health
            NoSurvivorError: If the shot would leave nobody alive
        """
        index: int | None = None
        alive_after = 0
        last_alive: int | None = None
        current: Participant | None = None

        for i, participant in enumerate(roster.participants()):
            alive = participant.is_alive
            if participant.name == report.name:
                index = i
                current = participant
                alive = bool(report.is_alive)
            if alive:
                alive_after += 1
                last_alive = i

        if index is None or current is None:
            raise UnknownParticipantError(report.name)
        if report.health > current.health:
            raise StaleShotError(report.name, report.health, current.health)
        if alive_after == 0:
            raise NoSurvivorError(
                f"Shot on {report.name!r} would leave no participant alive"
            )

        return ShotPlan(
            report=report,
            index=index,
            alive_after=alive_after,
            survivor_index=last_alive if alive_after == 1 else None,
            killed=current.is_alive and not report.is_alive,
        )

    def apply(self, plan: ShotPlan, roster: RosterStore) -> Winner | None:
        """Write a planned shot and return the survivor if it ends the round."""
        roster.apply_shot_result(
            plan.report.name, plan.report.health, bool(plan.report.is_alive)
        )
        if plan.survivor_index is None:
            return None
        survivor = roster.participants()[plan.survivor_index]
        return Winner(**survivor.model_dump())
