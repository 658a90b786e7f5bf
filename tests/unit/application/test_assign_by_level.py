"""Tests for AssignByLevelUseCase with in-memory fakes."""

from __future__ import annotations

from collections import Counter
from datetime import date

import pytest

from callcenter.application.use_cases.assign_by_level import AssignByLevelUseCase
from callcenter.domain.exceptions import (
    ConfigAlreadyUsedError,
    ConfigNotFoundError,
    ConfigStateError,
    NoAgentsAvailableError,
    NoCasesAvailableError,
)
from callcenter.domain.value_objects.enums import AgentLevel, ConfigType

TL, SR, MID, JR = AgentLevel.ordered()
TODAY = date(2025, 9, 1)
EVEN = {TL: 25.0, SR: 25.0, MID: 25.0, JR: 25.0}


def _uc(world, clock) -> AssignByLevelUseCase:
    return AssignByLevelUseCase(
        config_repo=world.configs,
        case_repo=world.cases,
        roster_repo=world.roster,
        level_repo=world.levels,
        clock=clock,
    )


async def _staff_one_per_level(world):
    return [await world.add_agent(level) for level in AgentLevel.ordered()]


@pytest.mark.asyncio
async def test_assigns_every_case_by_level(world, clock):
    await _staff_one_per_level(world)
    await world.add_cases(dpd=5, count=10)
    config = await world.add_config(EVEN)

    result = await _uc(world, clock).execute(1, TODAY, config.id, assigned_by=7)

    assert result.total_assigned == 10
    assert result.conflicts == 0
    assert result.unplaced == 0
    assert sum(result.assignments_by_level.values()) == 10
    assert all(row["total_cases"] in (2, 3) for row in result.assignments_by_agent)
    assert all(c.is_assigned() for c in world.cases.cases.values())


@pytest.mark.asyncio
async def test_cases_stamped_with_agent_auth_id_and_assigner(world, clock):
    agent = await world.add_agent(SR)
    await world.add_cases(dpd=1, count=2)
    config = await world.add_config({TL: 0, SR: 100, MID: 0, JR: 0})

    await _uc(world, clock).execute(1, TODAY, config.id, assigned_by=7)

    for case in world.cases.cases.values():
        assert case.assigned_to == agent.auth_user_id
        assert case.assigned_by == 7
        assert case.assigned_at == clock()


@pytest.mark.asyncio
async def test_config_marked_used_and_roster_locked(world, clock):
    await _staff_one_per_level(world)
    await world.add_cases(dpd=5, count=4)
    config = await world.add_config(EVEN)

    result = await _uc(world, clock).execute(1, TODAY, config.id, assigned_by=7)

    stored = world.configs.configs[config.id]
    assert stored.is_assigned
    assert stored.assigned_by == 7
    assert stored.assigned_at == clock()
    assert stored.assignments_by_agent == result.assignments_by_agent
    assert all(e.is_locked for e in world.roster.entries)


@pytest.mark.asyncio
async def test_config_cannot_be_used_twice(world, clock):
    await _staff_one_per_level(world)
    await world.add_cases(dpd=5, count=4)
    config = await world.add_config(EVEN)
    uc = _uc(world, clock)
    await uc.execute(1, TODAY, config.id, assigned_by=7)

    await world.add_cases(dpd=5, count=4)
    with pytest.raises(ConfigAlreadyUsedError):
        await uc.execute(1, TODAY, config.id, assigned_by=7)


@pytest.mark.asyncio
async def test_suggested_config_is_refused(world, clock):
    await _staff_one_per_level(world)
    await world.add_cases(dpd=5, count=4)
    config = await world.add_config(EVEN, config_type=ConfigType.SUGGESTED)

    with pytest.raises(ConfigStateError, match="approved"):
        await _uc(world, clock).execute(1, TODAY, config.id, assigned_by=7)
    assert not any(c.is_assigned() for c in world.cases.cases.values())


@pytest.mark.asyncio
async def test_unknown_config(world, clock):
    with pytest.raises(ConfigNotFoundError):
        await _uc(world, clock).execute(1, TODAY, 999, assigned_by=7)


@pytest.mark.asyncio
async def test_config_of_another_scope_is_refused(world, clock):
    config = await world.add_config(EVEN, scope_id=2)
    with pytest.raises(ConfigStateError, match="scope"):
        await _uc(world, clock).execute(1, TODAY, config.id, assigned_by=7)


@pytest.mark.asyncio
async def test_no_agents_is_nothing_to_do(world, clock):
    await world.add_cases(dpd=5, count=4)
    config = await world.add_config(EVEN)
    with pytest.raises(NoAgentsAvailableError):
        await _uc(world, clock).execute(1, TODAY, config.id, assigned_by=7)
    assert not world.configs.configs[config.id].is_assigned


@pytest.mark.asyncio
async def test_unleveled_agents_do_not_count_as_roster(world, clock):
    await world.add_agent(level=None)
    await world.add_cases(dpd=5, count=4)
    config = await world.add_config(EVEN)
    with pytest.raises(NoAgentsAvailableError):
        await _uc(world, clock).execute(1, TODAY, config.id, assigned_by=7)


@pytest.mark.asyncio
async def test_no_cases_is_nothing_to_do(world, clock):
    await _staff_one_per_level(world)
    config = await world.add_config(EVEN)
    with pytest.raises(NoCasesAvailableError):
        await _uc(world, clock).execute(1, TODAY, config.id, assigned_by=7)


@pytest.mark.asyncio
async def test_level_without_agents_goes_to_leftovers(world, clock):
    await world.add_agent(TL)
    await world.add_agent(SR)
    await world.add_agent(MID)
    await world.add_cases(dpd=3, count=20)
    config = await world.add_config(EVEN)

    result = await _uc(world, clock).execute(1, TODAY, config.id, assigned_by=7)

    assert result.total_assigned == 20
    assert result.leftover_assigned == 5
    assert result.assignments_by_level[JR.value] == 0


@pytest.mark.asyncio
async def test_concurrently_claimed_cases_are_skipped(world, clock):
    await _staff_one_per_level(world)
    cases = await world.add_cases(dpd=5, count=8)
    world.cases.stolen = {cases[0].id, cases[5].id}
    config = await world.add_config(EVEN)

    result = await _uc(world, clock).execute(1, TODAY, config.id, assigned_by=7)

    assert result.conflicts == 2
    assert result.total_assigned == 6
    assert sum(row["total_cases"] for row in result.assignments_by_agent) == 6


@pytest.mark.asyncio
async def test_only_this_scope_is_touched(world, clock):
    await _staff_one_per_level(world)
    await world.add_cases(dpd=5, count=4)
    other = await world.add_cases(dpd=5, count=3, scope_id=2)
    config = await world.add_config(EVEN)

    result = await _uc(world, clock).execute(1, TODAY, config.id, assigned_by=7)

    assert result.total_assigned == 4
    assert not any(world.cases.cases[c.id].is_assigned() for c in other)


@pytest.mark.asyncio
async def test_dpd_spread_per_agent(world, clock):
    senior = await world.add_agent(SR)
    await world.add_agent(JR)
    await world.add_cases(dpd=1, count=4)
    await world.add_cases(dpd=60, count=4)
    config = await world.add_config({TL: 0, SR: 50, MID: 0, JR: 50})

    result = await _uc(world, clock).execute(1, TODAY, config.id, assigned_by=7)

    row = next(r for r in result.assignments_by_agent if r["agent_id"] == senior.id)
    assert row["level"] == SR.value
    assert row["dpd_distribution"] == {1: 2, 60: 2}


@pytest.mark.asyncio
async def test_preview_writes_nothing(world, clock):
    await _staff_one_per_level(world)
    await world.add_cases(dpd=5, count=10)
    config = await world.add_config(EVEN, config_type=ConfigType.SUGGESTED)

    result = await _uc(world, clock).preview(1, TODAY, config.id)

    assert result.preview is True
    assert result.total_assigned == 10
    assert Counter(result.assignments_by_level.values()) == Counter([2, 2, 3, 3])
    assert not any(c.is_assigned() for c in world.cases.cases.values())
    assert not world.configs.configs[config.id].is_assigned
    assert world.configs.updates == 0
    assert not any(e.is_locked for e in world.roster.entries)


@pytest.mark.asyncio
async def test_config_for_another_date_is_refused(world, clock):
    await _staff_one_per_level(world)
    await world.add_cases(dpd=5, count=4)
    old = await world.add_config(EVEN, target_date=date(2025, 1, 1))
    uc = _uc(world, clock)

    with pytest.raises(ConfigStateError, match="2025-01-01"):
        await uc.execute(1, TODAY, old.id, assigned_by=7)
    with pytest.raises(ConfigStateError, match="2025-01-01"):
        await uc.preview(1, TODAY, old.id)

    assert not any(c.is_assigned() for c in world.cases.cases.values())
    assert not world.configs.configs[old.id].is_assigned


@pytest.mark.asyncio
async def test_run_with_every_claim_lost_leaves_config_usable(world, clock):
    await _staff_one_per_level(world)
    cases = await world.add_cases(dpd=5, count=3)
    world.cases.stolen = {c.id for c in cases}
    config = await world.add_config(EVEN)

    result = await _uc(world, clock).execute(1, TODAY, config.id, assigned_by=7)

    assert result.total_assigned == 0
    assert result.conflicts == 3
    assert not world.configs.configs[config.id].is_assigned
    assert world.configs.updates == 0
    assert not any(e.is_locked for e in world.roster.entries)
