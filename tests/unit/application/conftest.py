"""In-memory fakes shared by the use case tests."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

import pytest

from callcenter.application.ports.agent_level_repo import AgentLevelRepository
from callcenter.application.ports.agent_repo import AgentRepository
from callcenter.application.ports.case_repo import CaseRepository
from callcenter.application.ports.level_config_repo import LevelConfigRepository
from callcenter.application.ports.roster_repo import RosterRepository
from callcenter.domain.entities.agent import Agent
from callcenter.domain.entities.agent_level import AgentLevelRecord
from callcenter.domain.entities.case import CollectionCase
from callcenter.domain.entities.duty import DutyAssignment
from callcenter.domain.entities.level_config import LevelConfig
from callcenter.domain.value_objects.enums import AgentLevel, CaseStatus, ConfigType

# 06:00 on the work day, before the default 07:00 roster cutoff
NOW = datetime(2025, 9, 1, 6, 0, tzinfo=timezone.utc)
TODAY = NOW.date()

# ─── In-memory fakes ────────────────────────────────────────────────


class FakeAgentRepo(AgentRepository):
    def __init__(self):
        self.agents: dict[int, Agent] = {}

    async def save(self, agent):
        agent.id = len(self.agents) + 1
        self.agents[agent.id] = agent
        return agent

    async def get_by_id(self, agent_id):
        return self.agents.get(agent_id)

    async def get_by_auth_id(self, auth_user_id):
        return next((a for a in self.agents.values() if a.auth_user_id == auth_user_id), None)


class FakeAgentLevelRepo(AgentLevelRepository):
    def __init__(self):
        self.records: list[AgentLevelRecord] = []

    async def get_active(self, agent_id, scope_id):
        return next(
            (r for r in self.records
             if r.agent_id == agent_id and r.scope_id == scope_id and r.is_active),
            None,
        )

    async def get_active_levels(self, agent_ids, scope_id):
        return {
            r.agent_id: r.level for r in self.records
            if r.agent_id in agent_ids and r.scope_id == scope_id and r.is_active
        }

    async def save(self, record):
        record.id = len(self.records) + 1
        self.records.append(record)
        return record

    async def deactivate(self, record_id, updated_by, updated_at):
        for r in self.records:
            if r.id == record_id:
                r.is_active = False
                r.updated_by = updated_by
                r.updated_at = updated_at

    async def get_history(self, agent_id, scope_id):
        rows = [r for r in self.records if r.agent_id == agent_id and r.scope_id == scope_id]
        return sorted(rows, key=lambda r: r.id, reverse=True)


class FakeRosterRepo(RosterRepository):
    def __init__(self, agent_repo: FakeAgentRepo):
        self._agents = agent_repo
        self.entries: list[DutyAssignment] = []

    async def get_on_duty_agents(self, work_date, scope_id=None):
        result, seen = [], set()
        for e in self.entries:
            if e.work_date != work_date or not e.is_working:
                continue
            if scope_id is not None and e.scope_id != scope_id:
                continue
            agent = self._agents.agents.get(e.agent_id)
            if agent is None or not agent.is_active or agent.id in seen:
                continue
            seen.add(agent.id)
            # a fresh copy per call, like a new ORM load
            result.append(copy.copy(agent))
        return result

    async def get_entry(self, agent_id, work_date, scope_id):
        return next(
            (e for e in self.entries
             if e.agent_id == agent_id and e.work_date == work_date and e.scope_id == scope_id),
            None,
        )

    async def save(self, entry):
        entry.id = len(self.entries) + 1
        self.entries.append(entry)
        return entry

    async def update(self, entry):
        return entry

    async def delete(self, entry_id):
        self.entries = [e for e in self.entries if e.id != entry_id]

    async def lock(self, work_date, scope_id):
        touched = 0
        for e in self.entries:
            if e.work_date == work_date and e.scope_id == scope_id:
                e.is_locked = True
                touched += 1
        return touched


class FakeCaseRepo(CaseRepository):
    def __init__(self):
        self.cases: dict[int, CollectionCase] = {}
        # ids a "concurrent run" grabs right before our claim
        self.stolen: set[int] = set()

    async def save(self, case):
        case.id = len(self.cases) + 1
        self.cases[case.id] = case
        return case

    async def get_by_id(self, case_id):
        return self.cases.get(case_id)

    async def get_unassigned_for_scope(self, scope_id):
        rows = [c for c in self.cases.values() if c.scope_id == scope_id and c.assigned_to is None]
        return [copy.copy(c) for c in sorted(rows, key=lambda c: (c.dpd, c.id))]

    async def get_oldest_unassigned(self, limit, exclude_scope_id=None):
        rows = [
            c for c in self.cases.values()
            if c.assigned_to is None and c.status != CaseStatus.COMPLETED
            and c.scope_id != exclude_scope_id
        ]
        rows.sort(key=lambda c: (c.created_at, c.id))
        return [copy.copy(c) for c in rows[:limit]]

    async def count_unassigned(self, scope_id):
        return sum(1 for c in self.cases.values() if c.scope_id == scope_id and c.assigned_to is None)

    async def claim(self, case_id, agent_auth_id, assigned_by, assigned_at):
        stored = self.cases[case_id]
        if case_id in self.stolen or stored.assigned_to is not None:
            return False
        stored.mark_assigned(agent_auth_id, assigned_by, assigned_at)
        return True


class FakeLevelConfigRepo(LevelConfigRepository):
    def __init__(self):
        self.configs: dict[int, LevelConfig] = {}
        self.updates = 0

    async def get_by_id(self, config_id):
        return self.configs.get(config_id)

    async def get_active(self, scope_id, target_date, config_type):
        return next(
            (c for c in self.configs.values()
             if c.scope_id == scope_id and c.target_date == target_date
             and c.config_type == config_type and c.is_active),
            None,
        )

    async def get_latest_approved_before(self, scope_id, target_date):
        rows = [
            c for c in self.configs.values()
            if c.scope_id == scope_id and c.target_date < target_date
            and c.config_type == ConfigType.APPROVED and c.is_active
        ]
        return max(rows, key=lambda c: (c.target_date, c.id), default=None)

    async def deactivate(self, scope_id, target_date, config_type, exclude_id=None):
        touched = 0
        for c in self.configs.values():
            if (c.scope_id == scope_id and c.target_date == target_date
                    and c.config_type == config_type and c.is_active and c.id != exclude_id):
                c.is_active = False
                touched += 1
        return touched

    async def save(self, config):
        config.id = len(self.configs) + 1
        self.configs[config.id] = config
        self._check_unique()
        return config

    async def update(self, config):
        self.configs[config.id] = config
        self.updates += 1
        self._check_unique()
        return config

    async def list_for_scope(self, scope_id, config_type=None, date_from=None, date_to=None):
        rows = [
            c for c in self.configs.values()
            if c.scope_id == scope_id
            and (config_type is None or c.config_type == config_type)
            and (date_from is None or c.target_date >= date_from)
            and (date_to is None or c.target_date <= date_to)
        ]
        return sorted(rows, key=lambda c: (c.target_date, c.id), reverse=True)

    def _check_unique(self):
        # mirrors the partial unique index on (scope_id, target_date, config_type)
        keys = [
            (c.scope_id, c.target_date, c.config_type)
            for c in self.configs.values() if c.is_active
        ]
        assert len(keys) == len(set(keys)), "two active configs share scope, date and type"


# ─── World builder ──────────────────────────────────────────────────


@dataclass
class World:
    agents: FakeAgentRepo = field(default_factory=FakeAgentRepo)
    levels: FakeAgentLevelRepo = field(default_factory=FakeAgentLevelRepo)
    cases: FakeCaseRepo = field(default_factory=FakeCaseRepo)
    configs: FakeLevelConfigRepo = field(default_factory=FakeLevelConfigRepo)
    roster: FakeRosterRepo = None  # type: ignore[assignment]

    def __post_init__(self):
        self.roster = FakeRosterRepo(self.agents)

    async def add_agent(
        self,
        level: AgentLevel | None = None,
        on_duty: date | None = TODAY,
        scope_id: int = 1,
        name: str | None = None,
    ) -> Agent:
        n = len(self.agents.agents) + 1
        agent = await self.agents.save(
            Agent(id=None, auth_user_id=1000 + n, name=name or f"Agent {n}")
        )
        if level is not None:
            await self.levels.save(
                AgentLevelRecord(id=None, agent_id=agent.id, scope_id=scope_id, level=level)
            )
        if on_duty is not None:
            await self.roster.save(
                DutyAssignment(id=None, agent_id=agent.id, work_date=on_duty, scope_id=scope_id)
            )
        return agent

    async def add_cases(self, dpd: int, count: int, scope_id: int = 1) -> list[CollectionCase]:
        created = []
        for _ in range(count):
            n = len(self.cases.cases) + 1
            created.append(
                await self.cases.save(
                    CollectionCase(
                        id=None,
                        scope_id=scope_id,
                        contract_no=f"C{n:05d}",
                        dpd=dpd,
                        created_at=NOW - timedelta(days=30) + timedelta(minutes=n),
                    )
                )
            )
        return created

    async def add_config(
        self,
        percentages: dict[AgentLevel, float],
        config_type: ConfigType = ConfigType.APPROVED,
        target_date: date = TODAY,
        scope_id: int = 1,
        **kw,
    ) -> LevelConfig:
        return await self.configs.save(
            LevelConfig(
                id=None,
                scope_id=scope_id,
                target_date=target_date,
                percentages=percentages,
                config_type=config_type,
                **kw,
            )
        )


@pytest.fixture
def world() -> World:
    return World()


@pytest.fixture
def clock():
    return lambda: NOW
