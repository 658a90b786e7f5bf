"""RoundRobinPolicy — deterministic rotation of cases over agents."""

from __future__ import annotations

from collections.abc import Sequence

from callcenter.domain.entities.agent import Agent
from callcenter.domain.entities.assignment import CaseAssignment
from callcenter.domain.entities.case import CollectionCase


def pick_next(agents: Sequence[Agent], cursor: int) -> tuple[Agent, int]:
    """Pick ``agents[cursor mod len(agents)]``.

    The caller owns the ordering of *agents*; it is not re-sorted here.

    Returns:
        (chosen_agent, new_cursor)

    Raises:
        ValueError: if agents list is empty.
    """
    if not agents:
        raise ValueError("Cannot pick from an empty agent list")

    chosen = agents[cursor % len(agents)]
    return chosen, cursor + 1


def assign_round_robin(
    cases: Sequence[CollectionCase],
    agents: Sequence[Agent],
    level: str | None = None,
    leftover: bool = False,
) -> list[CaseAssignment]:
    """Hand cases out in input order: agent 0, 1, ..., M-1, 0, 1, ...

    The cursor starts at 0 on every call. When a level is served bucket by
    bucket, agents early in the list can therefore end up one case ahead of
    the others; this is a known fairness limitation.

    An empty agent list places nothing; the cases stay with the caller.
    """
    if not agents:
        return []

    placed: list[CaseAssignment] = []
    cursor = 0
    for case in cases:
        agent, cursor = pick_next(agents, cursor)
        placed.append(
            CaseAssignment(
                case=case,
                agent=agent,
                level=level or agent.level_label,
                leftover=leftover,
            )
        )
    return placed
