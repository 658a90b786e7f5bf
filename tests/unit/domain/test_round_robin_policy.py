"""Tests for RoundRobinPolicy."""

import pytest

from callcenter.domain.entities.agent import Agent
from callcenter.domain.entities.case import CollectionCase
from callcenter.domain.policies.round_robin import assign_round_robin, pick_next
from callcenter.domain.value_objects.enums import AgentLevel


def _agent(aid: int, level: AgentLevel | None = None) -> Agent:
    return Agent(id=aid, auth_user_id=100 + aid, name=f"A{aid}", level=level)


def _case(cid: int, dpd: int = 1) -> CollectionCase:
    return CollectionCase(id=cid, scope_id=1, contract_no=f"C{cid}", dpd=dpd)


def test_pick_single_candidate():
    chosen, cursor = pick_next([_agent(1)], 0)
    assert chosen.id == 1
    assert cursor == 1


def test_pick_cycles_in_given_order():
    """No re-sorting: the caller's order is the rotation order."""
    agents = [_agent(3), _agent(1), _agent(2)]
    ids, cursor = [], 0
    for _ in range(6):
        chosen, cursor = pick_next(agents, cursor)
        ids.append(chosen.id)
    assert ids == [3, 1, 2, 3, 1, 2]


def test_cursor_wraps_around():
    chosen, cursor = pick_next([_agent(1), _agent(2)], 1001)
    assert chosen.id == 2  # 1001 % 2 == 1
    assert cursor == 1002


def test_pick_empty_raises():
    with pytest.raises(ValueError, match="empty agent list"):
        pick_next([], 0)


def test_case_i_goes_to_agent_i_mod_m():
    agents = [_agent(1), _agent(2), _agent(3)]
    cases = [_case(i) for i in range(1, 8)]
    placed = assign_round_robin(cases, agents)
    assert [a.agent.id for a in placed] == [1, 2, 3, 1, 2, 3, 1]
    assert [a.case.id for a in placed] == [1, 2, 3, 4, 5, 6, 7]


def test_counts_differ_by_at_most_one():
    agents = [_agent(i) for i in range(1, 5)]
    placed = assign_round_robin([_case(i) for i in range(11)], agents)
    counts = [sum(1 for a in placed if a.agent.id == ag.id) for ag in agents]
    assert max(counts) - min(counts) <= 1
    assert sum(counts) == 11


def test_cursor_resets_on_every_call():
    """Known fairness limitation: two small calls both start at agent 0."""
    agents = [_agent(1), _agent(2)]
    first = assign_round_robin([_case(1)], agents)
    second = assign_round_robin([_case(2)], agents)
    assert first[0].agent.id == 1
    assert second[0].agent.id == 1


def test_no_agents_places_nothing():
    assert assign_round_robin([_case(1), _case(2)], []) == []


def test_level_label_defaults_to_agent_level():
    placed = assign_round_robin([_case(1)], [_agent(1, AgentLevel.SENIOR)])
    assert placed[0].level == "senior"
    assert placed[0].leftover is False


def test_explicit_level_and_leftover_flag():
    placed = assign_round_robin([_case(1)], [_agent(1)], level="junior", leftover=True)
    assert placed[0].level == "junior"
    assert placed[0].leftover is True


def test_unleveled_agent_label():
    placed = assign_round_robin([_case(1)], [_agent(1)])
    assert placed[0].level == "unleveled"
