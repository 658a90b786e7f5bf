"""LevelPlanPolicy — turn percentages, roster and cases into placements."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from callcenter.domain.entities.agent import Agent
from callcenter.domain.entities.assignment import CaseAssignment
from callcenter.domain.entities.case import CollectionCase
from callcenter.domain.policies.leftover import assign_leftovers, pool_agents
from callcenter.domain.policies.round_robin import assign_round_robin
from callcenter.domain.policies.stratified import (
    LevelDpdAllocation,
    allocate_by_dpd,
    level_totals,
)
from callcenter.domain.value_objects.enums import AgentLevel


@dataclass
class AssignmentPlan:
    """Outcome of planning one stratified run (nothing persisted yet)."""

    allocation: LevelDpdAllocation
    quota: dict[AgentLevel, int]
    placed: list[CaseAssignment] = field(default_factory=list)
    leftovers: list[CaseAssignment] = field(default_factory=list)
    unplaced: list[CollectionCase] = field(default_factory=list)
    levels_without_agents: list[AgentLevel] = field(default_factory=list)

    @property
    def assignments(self) -> list[CaseAssignment]:
        return self.placed + self.leftovers


def plan_level_assignment(
    cases_by_dpd: Mapping[int, Sequence[CollectionCase]],
    agents_by_level: Mapping[AgentLevel, Sequence[Agent]],
    percentages: Mapping[AgentLevel, float],
) -> AssignmentPlan:
    """Plan a stratified run.

    1. Allocate level quotas per DPD bucket (ascending DPD).
    2. In each bucket, levels take their share in seniority order and
       round-robin it over their own agents.
    3. Shares of levels with nobody on duty, plus anything the allocation
       left unclaimed, go to a flat round robin over all agents.

    Each case ends up in exactly one of ``placed``, ``leftovers`` or
    ``unplaced``.
    """
    levels = {level: percentages.get(level, 0.0) for level in AgentLevel.ordered()}
    allocation = allocate_by_dpd(cases_by_dpd, levels)
    plan = AssignmentPlan(allocation=allocation, quota=level_totals(allocation))

    pending: list[CollectionCase] = []
    for dpd in sorted(cases_by_dpd):
        queue = list(cases_by_dpd[dpd])
        for level in AgentLevel.ordered():
            count = allocation[level].get(dpd, 0)
            if count <= 0:
                continue
            chunk, queue = queue[:count], queue[count:]
            agents = agents_by_level.get(level) or []
            if not agents:
                if level not in plan.levels_without_agents:
                    plan.levels_without_agents.append(level)
                pending.extend(chunk)
                continue
            plan.placed.extend(assign_round_robin(chunk, agents, level=level.value))
        pending.extend(queue)

    plan.leftovers = assign_leftovers(pending, pool_agents(agents_by_level))
    plan.unplaced = pending[len(plan.leftovers):]
    return plan
