"""Summaries shared by the assignment use cases."""

from __future__ import annotations

from collections.abc import Sequence

from callcenter.domain.entities.agent import Agent
from callcenter.domain.entities.assignment import CaseAssignment
from callcenter.domain.value_objects.enums import AgentLevel


def summarize_by_level(assignments: Sequence[CaseAssignment]) -> dict[str, int]:
    """Cases per staffed level; every level present, zero included."""
    summary = {level.value: 0 for level in AgentLevel.ordered()}
    for a in assignments:
        if a.level in summary:
            summary[a.level] += 1
    return summary


def summarize_by_agent(assignments: Sequence[CaseAssignment]) -> list[dict]:
    """One row per agent that received cases, in order of first assignment."""
    rows: dict[int, dict] = {}
    for a in assignments:
        row = rows.get(a.agent.id)
        if row is None:
            row = rows[a.agent.id] = {
                "agent_id": a.agent.id,
                "auth_user_id": a.agent.auth_user_id,
                "name": a.agent.name,
                "level": a.agent.level_label,
                "total_cases": 0,
                "dpd_distribution": {},
            }
        row["total_cases"] += 1
        row["dpd_distribution"][a.dpd] = row["dpd_distribution"].get(a.dpd, 0) + 1
    return list(rows.values())


def count_per_agent(assignments: Sequence[CaseAssignment], agents: Sequence[Agent]) -> list[dict]:
    """Case count for every agent on the roster, zeros included."""
    counts = {agent.id: 0 for agent in agents}
    for a in assignments:
        counts[a.agent.id] = counts.get(a.agent.id, 0) + 1
    return [
        {"agent_id": agent.id, "name": agent.name, "count": counts[agent.id]}
        for agent in agents
    ]
