"""LeftoverPolicy — place cases whose level had quota but nobody on duty."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from callcenter.domain.entities.agent import Agent
from callcenter.domain.entities.assignment import CaseAssignment
from callcenter.domain.entities.case import CollectionCase
from callcenter.domain.policies.round_robin import assign_round_robin
from callcenter.domain.value_objects.enums import AgentLevel


def pool_agents(agents_by_level: Mapping[AgentLevel, Sequence[Agent]]) -> list[Agent]:
    """Flatten the roster, most senior level first, keeping roster order."""
    pooled: list[Agent] = []
    for level in AgentLevel.ordered():
        pooled.extend(agents_by_level.get(level, ()))
    return pooled


def assign_leftovers(
    cases: Sequence[CollectionCase],
    all_agents: Sequence[Agent],
) -> list[CaseAssignment]:
    """Flat round robin over every available agent, whatever their level.

    With nobody available the result is empty and the cases remain
    unassigned for the caller to report.
    """
    return assign_round_robin(cases, all_agents, leftover=True)
