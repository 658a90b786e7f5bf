"""AssignRoundRobinUseCase — flat round robin for rosters without levels."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timezone

from callcenter.application.ports.case_repo import CaseRepository
from callcenter.application.ports.roster_repo import RosterRepository
from callcenter.application.services.case_inventory import CaseInventory
from callcenter.application.use_cases.summaries import count_per_agent
from callcenter.domain.entities.assignment import CaseAssignment
from callcenter.domain.exceptions import NoAgentsAvailableError, NoCasesAvailableError
from callcenter.domain.policies.round_robin import assign_round_robin

logger = logging.getLogger(__name__)

DEFAULT_BATCH_LIMIT = 500


@dataclass
class SimpleRunResult:
    assignment_date: date
    total_cases: int
    total_agents: int
    assignments: list[dict]
    summary: list[dict]
    conflicts: int = 0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssignRoundRobinUseCase:
    """Hand the oldest unassigned cases to everyone on duty, in turn.

    Only cases without an agent are picked, oldest first, at most
    ``batch_limit`` per run. Existing assignments are never reset.
    Cases of ``leveled_scope_id`` belong to the stratified run and are
    never picked here.
    """

    def __init__(
        self,
        roster_repo: RosterRepository,
        case_repo: CaseRepository,
        batch_limit: int = DEFAULT_BATCH_LIMIT,
        leveled_scope_id: int | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._roster = roster_repo
        self._cases = case_repo
        self._inventory = CaseInventory(case_repo)
        self._batch_limit = batch_limit
        self._leveled_scope_id = leveled_scope_id
        self._clock = clock

    async def execute(self, assigned_by: int, assignment_date: date | None = None) -> SimpleRunResult:
        now = self._clock()
        assignment_date = assignment_date or now.date()
        logger.info("Starting round-robin assignment for %s (by %s)", assignment_date, assigned_by)

        agents = await self._roster.get_on_duty_agents(assignment_date)
        if not agents:
            raise NoAgentsAvailableError(f"No duty roster found for date: {assignment_date}")

        cases = await self._inventory.oldest_unassigned(self._batch_limit, self._leveled_scope_id)
        if not cases:
            raise NoCasesAvailableError("No unassigned cases available for assignment")

        committed: list[CaseAssignment] = []
        conflicts = 0
        for a in assign_round_robin(cases, agents):
            if await self._cases.claim(a.case.id, a.agent.auth_user_id, assigned_by, now):
                a.case.mark_assigned(a.agent.auth_user_id, assigned_by, now)
                committed.append(a)
            else:
                conflicts += 1

        logger.info(
            "Round-robin assignment completed: date=%s cases=%d agents=%d assigned=%d conflicts=%d",
            assignment_date, len(cases), len(agents), len(committed), conflicts,
        )

        return SimpleRunResult(
            assignment_date=assignment_date,
            total_cases=len(cases),
            total_agents=len(agents),
            assignments=[
                {
                    "case_id": a.case.id,
                    "contract_no": a.case.contract_no,
                    "agent_id": a.agent.id,
                    "agent_name": a.agent.name,
                    "sequence": i + 1,
                }
                for i, a in enumerate(committed)
            ],
            summary=count_per_agent(committed, agents),
            conflicts=conflicts,
        )
