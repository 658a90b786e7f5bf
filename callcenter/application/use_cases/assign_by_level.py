"""AssignByLevelUseCase — stratified assignment driven by an approved config."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from callcenter.application.ports.agent_level_repo import AgentLevelRepository
from callcenter.application.ports.case_repo import CaseRepository
from callcenter.application.ports.level_config_repo import LevelConfigRepository
from callcenter.application.ports.roster_repo import RosterRepository
from callcenter.application.services.case_inventory import CaseInventory
from callcenter.application.services.roster_provider import RosterProvider
from callcenter.application.use_cases.summaries import summarize_by_agent, summarize_by_level
from callcenter.domain.entities.assignment import CaseAssignment
from callcenter.domain.entities.level_config import LevelConfig
from callcenter.domain.exceptions import (
    ConfigAlreadyUsedError,
    ConfigNotFoundError,
    ConfigStateError,
    NoAgentsAvailableError,
    NoCasesAvailableError,
)
from callcenter.domain.policies.level_plan import AssignmentPlan, plan_level_assignment

logger = logging.getLogger(__name__)


@dataclass
class LevelRunResult:
    """Summary of one stratified run (or preview)."""

    scope_id: int
    target_date: date
    config_id: int
    total_assigned: int
    assignments_by_level: dict[str, int]
    assignments_by_agent: list[dict]
    leftover_assigned: int = 0
    unplaced: int = 0
    conflicts: int = 0
    preview: bool = False
    percentages: dict[str, float] = field(default_factory=dict)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssignByLevelUseCase:
    """Run the stratified assignment for one scope and date.

    Pipeline:
    1. Load the config (approved, not yet used, same scope and date)
    2. Resolve the on-duty roster by level
    3. Load unassigned cases bucketed by DPD
    4. Plan: quota per bucket, round robin per level, leftovers
    5. Claim each planned case with a conditional update
    6. Stamp the config as used and lock the roster (only if a case was claimed)

    Nothing is committed here; the caller owns the transaction.
    """

    def __init__(
        self,
        config_repo: LevelConfigRepository,
        case_repo: CaseRepository,
        roster_repo: RosterRepository,
        level_repo: AgentLevelRepository,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._configs = config_repo
        self._cases = case_repo
        self._roster_repo = roster_repo
        self._roster = RosterProvider(roster_repo, level_repo)
        self._inventory = CaseInventory(case_repo)
        self._clock = clock

    async def execute(
        self,
        scope_id: int,
        target_date: date,
        config_id: int,
        assigned_by: int,
    ) -> LevelRunResult:
        logger.info(
            "Starting level assignment: scope=%s date=%s config=%s by=%s",
            scope_id, target_date, config_id, assigned_by,
        )
        config = await self._load_config(config_id, scope_id, target_date)
        if not config.is_approved():
            raise ConfigStateError("Only approved configs can be used for assignment")
        if config.is_assigned:
            raise ConfigAlreadyUsedError(
                f"Config {config_id} was already used for assignment at {config.assigned_at}"
            )

        plan = await self._plan(scope_id, target_date, config)
        now = self._clock()

        committed: list[CaseAssignment] = []
        conflicts = 0
        for a in plan.assignments:
            claimed = await self._cases.claim(a.case.id, a.agent.auth_user_id, assigned_by, now)
            if not claimed:
                conflicts += 1
                continue
            a.case.mark_assigned(a.agent.auth_user_id, assigned_by, now)
            committed.append(a)

        if conflicts:
            logger.warning(
                "Scope %s: %d case(s) were claimed by a concurrent run and skipped",
                scope_id, conflicts,
            )

        by_agent = summarize_by_agent(committed)
        locked = 0
        if committed:
            config.is_assigned = True
            config.assigned_by = assigned_by
            config.assigned_at = now
            config.assignments_by_agent = by_agent
            await self._configs.update(config)
            locked = await self._roster_repo.lock(target_date, scope_id)
        else:
            # every claim lost: the config stays usable and the roster editable
            logger.warning("Scope %s: no case committed, config %s left unused", scope_id, config_id)

        leftover_assigned = sum(1 for a in committed if a.leftover)
        logger.info(
            "Level assignment completed: config=%s assigned=%d leftovers=%d unplaced=%d roster_locked=%d",
            config_id, len(committed), leftover_assigned, len(plan.unplaced), locked,
        )

        return LevelRunResult(
            scope_id=scope_id,
            target_date=target_date,
            config_id=config_id,
            total_assigned=len(committed),
            assignments_by_level=summarize_by_level(committed),
            assignments_by_agent=by_agent,
            leftover_assigned=leftover_assigned,
            unplaced=len(plan.unplaced),
            conflicts=conflicts,
            percentages=_percentages_out(config),
        )

    async def preview(self, scope_id: int, target_date: date, config_id: int) -> LevelRunResult:
        """What ``execute`` would do, without touching any case.

        Suggested configs are accepted so a supervisor can compare a
        suggestion before approving it.
        """
        config = await self._load_config(config_id, scope_id, target_date)
        plan = await self._plan(scope_id, target_date, config)
        assignments = plan.assignments

        logger.info(
            "Level assignment preview: config=%s would_assign=%d",
            config_id, len(assignments),
        )
        return LevelRunResult(
            scope_id=scope_id,
            target_date=target_date,
            config_id=config_id,
            total_assigned=len(assignments),
            assignments_by_level=summarize_by_level(assignments),
            assignments_by_agent=summarize_by_agent(assignments),
            leftover_assigned=len(plan.leftovers),
            unplaced=len(plan.unplaced),
            preview=True,
            percentages=_percentages_out(config),
        )

    async def _load_config(self, config_id: int, scope_id: int, target_date: date) -> LevelConfig:
        config = await self._configs.get_by_id(config_id)
        if config is None:
            raise ConfigNotFoundError(f"Config with ID {config_id} not found")
        if config.scope_id != scope_id:
            raise ConfigStateError(
                f"Config {config_id} belongs to scope {config.scope_id}, not {scope_id}"
            )
        if config.target_date != target_date:
            raise ConfigStateError(
                f"Config {config_id} is for {config.target_date}, not {target_date}"
            )
        return config

    async def _plan(self, scope_id: int, target_date: date, config: LevelConfig) -> AssignmentPlan:
        roster = await self._roster.by_level(target_date, scope_id)
        if roster.is_empty():
            raise NoAgentsAvailableError(f"No leveled agents on the duty roster for {target_date}")

        cases_by_dpd = await self._inventory.unassigned_by_dpd(scope_id)
        if not cases_by_dpd:
            raise NoCasesAvailableError(f"No unassigned cases found for scope {scope_id}")

        logger.info(
            "Assignment data loaded: cases=%d dpd_buckets=%s agents=%s",
            sum(len(c) for c in cases_by_dpd.values()),
            list(cases_by_dpd),
            {level.value: n for level, n in roster.counts().items()},
        )

        plan = plan_level_assignment(cases_by_dpd, roster.by_level, config.percentages)

        for level in plan.levels_without_agents:
            logger.warning(
                "Level %s has quota %d but no agents on duty; its cases go to leftovers",
                level.value, plan.quota[level],
            )
        if plan.unplaced:
            logger.warning("%d case(s) could not be placed with any agent", len(plan.unplaced))
        return plan


def _percentages_out(config: LevelConfig) -> dict[str, float]:
    return {level.value: float(pct) for level, pct in config.percentages.items()}
