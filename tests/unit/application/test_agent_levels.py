"""Tests for AgentLevelUseCase with in-memory fakes."""

from __future__ import annotations

import pytest

from callcenter.application.use_cases.agent_levels import AgentLevelUseCase
from callcenter.domain.exceptions import AgentNotFoundError, LevelUnchangedError
from callcenter.domain.value_objects.enums import AgentLevel


def _uc(world, clock) -> AgentLevelUseCase:
    return AgentLevelUseCase(agent_repo=world.agents, level_repo=world.levels, clock=clock)


@pytest.mark.asyncio
async def test_first_level_is_created(world, clock):
    agent = await world.add_agent()

    record = await _uc(world, clock).set_level(agent.id, 1, AgentLevel.JUNIOR, action_by=3)

    assert record.level == AgentLevel.JUNIOR
    assert record.is_active
    assert record.created_by == 3
    assert record.created_at == clock()


@pytest.mark.asyncio
async def test_change_deactivates_previous_record(world, clock):
    agent = await world.add_agent(AgentLevel.JUNIOR)
    uc = _uc(world, clock)

    await uc.set_level(agent.id, 1, AgentLevel.MID_LEVEL, action_by=3)

    history = await uc.history(agent.id, 1)
    assert [r.level for r in history] == [AgentLevel.MID_LEVEL, AgentLevel.JUNIOR]
    assert [r.is_active for r in history] == [True, False]
    assert history[1].updated_by == 3
    assert history[1].updated_at == clock()


@pytest.mark.asyncio
async def test_same_level_is_refused(world, clock):
    agent = await world.add_agent(AgentLevel.SENIOR)
    with pytest.raises(LevelUnchangedError):
        await _uc(world, clock).set_level(agent.id, 1, AgentLevel.SENIOR, action_by=3)
    assert len(world.levels.records) == 1


@pytest.mark.asyncio
async def test_levels_are_per_scope(world, clock):
    agent = await world.add_agent(AgentLevel.SENIOR)
    uc = _uc(world, clock)

    await uc.set_level(agent.id, 2, AgentLevel.SENIOR, action_by=3)

    assert (await world.levels.get_active(agent.id, 1)).level == AgentLevel.SENIOR
    assert (await world.levels.get_active(agent.id, 2)).level == AgentLevel.SENIOR


@pytest.mark.asyncio
async def test_unknown_agent(world, clock):
    with pytest.raises(AgentNotFoundError):
        await _uc(world, clock).set_level(404, 1, AgentLevel.SENIOR, action_by=3)
