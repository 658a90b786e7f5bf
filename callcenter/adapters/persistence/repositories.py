"""SQLAlchemy repository implementations."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from callcenter.adapters.persistence.models import (
    AgentLevelModel,
    AgentModel,
    CollectionCaseModel,
    DutyRosterModel,
    LevelConfigModel,
)
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

# Column prefix per level in level_configs
_LEVEL_COLUMNS: dict[AgentLevel, str] = {
    AgentLevel.TEAM_LEADER: "team_leader",
    AgentLevel.SENIOR: "senior",
    AgentLevel.MID_LEVEL: "mid_level",
    AgentLevel.JUNIOR: "junior",
}

# ─── Mappers ─────────────────────────────────────────────────────────


def _agent_to_domain(m: AgentModel) -> Agent:
    return Agent(id=m.id, auth_user_id=m.auth_user_id, name=m.name, is_active=m.is_active)


def _level_to_domain(m: AgentLevelModel) -> AgentLevelRecord:
    return AgentLevelRecord(
        id=m.id,
        agent_id=m.agent_id,
        scope_id=m.scope_id,
        level=AgentLevel(m.level),
        is_active=m.is_active,
        created_by=m.created_by,
        created_at=m.created_at,
        updated_by=m.updated_by,
        updated_at=m.updated_at,
    )


def _duty_to_domain(m: DutyRosterModel) -> DutyAssignment:
    return DutyAssignment(
        id=m.id,
        agent_id=m.agent_id,
        work_date=m.work_date,
        scope_id=m.scope_id,
        is_working=m.is_working,
        is_locked=m.is_locked,
        created_by=m.created_by,
    )


def _case_to_domain(m: CollectionCaseModel) -> CollectionCase:
    return CollectionCase(
        id=m.id,
        scope_id=m.scope_id,
        contract_no=m.contract_no,
        dpd=m.dpd,
        status=CaseStatus(m.status),
        assigned_to=m.assigned_to,
        assigned_by=m.assigned_by,
        assigned_at=m.assigned_at,
        created_at=m.created_at,
    )


def _config_to_domain(m: LevelConfigModel) -> LevelConfig:
    return LevelConfig(
        id=m.id,
        scope_id=m.scope_id,
        target_date=m.target_date,
        percentages={
            level: float(getattr(m, f"{col}_percentage"))
            for level, col in _LEVEL_COLUMNS.items()
        },
        agent_counts={
            level: getattr(m, f"{col}_count") for level, col in _LEVEL_COLUMNS.items()
        },
        total_cases=m.total_cases,
        config_type=ConfigType(m.config_type),
        is_active=m.is_active,
        is_assigned=m.is_assigned,
        based_on_config_id=m.based_on_config_id,
        remarks=m.remarks,
        created_by=m.created_by,
        approved_by=m.approved_by,
        approved_at=m.approved_at,
        assigned_by=m.assigned_by,
        assigned_at=m.assigned_at,
        assignments_by_agent=m.assignments_by_agent,
        created_at=m.created_at,
    )


def _config_values(config: LevelConfig) -> dict:
    values = {
        "scope_id": config.scope_id,
        "target_date": config.target_date,
        "total_agents": config.total_agents,
        "total_cases": config.total_cases,
        "config_type": config.config_type.value,
        "is_active": config.is_active,
        "is_assigned": config.is_assigned,
        "remarks": config.remarks,
        "based_on_config_id": config.based_on_config_id,
        "created_by": config.created_by,
        "approved_by": config.approved_by,
        "approved_at": config.approved_at,
        "assigned_by": config.assigned_by,
        "assigned_at": config.assigned_at,
        "assignments_by_agent": config.assignments_by_agent,
    }
    for level, col in _LEVEL_COLUMNS.items():
        values[f"{col}_percentage"] = Decimal(str(config.percentage_for(level)))
        values[f"{col}_count"] = config.agent_counts.get(level, 0)
    return values


# ─── Repositories ────────────────────────────────────────────────────


class SqlAgentRepository(AgentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, agent: Agent) -> Agent:
        m = AgentModel(auth_user_id=agent.auth_user_id, name=agent.name, is_active=agent.is_active)
        self._s.add(m)
        await self._s.flush()
        agent.id = m.id
        return agent

    async def get_by_id(self, agent_id: int) -> Agent | None:
        m = await self._s.get(AgentModel, agent_id)
        return _agent_to_domain(m) if m else None

    async def get_by_auth_id(self, auth_user_id: int) -> Agent | None:
        result = await self._s.execute(
            select(AgentModel).where(AgentModel.auth_user_id == auth_user_id)
        )
        m = result.scalar_one_or_none()
        return _agent_to_domain(m) if m else None


class SqlAgentLevelRepository(AgentLevelRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_active(self, agent_id: int, scope_id: int) -> AgentLevelRecord | None:
        result = await self._s.execute(
            select(AgentLevelModel).where(
                AgentLevelModel.agent_id == agent_id,
                AgentLevelModel.scope_id == scope_id,
                AgentLevelModel.is_active.is_(True),
            )
        )
        m = result.scalar_one_or_none()
        return _level_to_domain(m) if m else None

    async def get_active_levels(self, agent_ids: list[int], scope_id: int) -> dict[int, AgentLevel]:
        if not agent_ids:
            return {}
        result = await self._s.execute(
            select(AgentLevelModel.agent_id, AgentLevelModel.level).where(
                AgentLevelModel.agent_id.in_(agent_ids),
                AgentLevelModel.scope_id == scope_id,
                AgentLevelModel.is_active.is_(True),
            )
        )
        return {agent_id: AgentLevel(level) for agent_id, level in result.all()}

    async def save(self, record: AgentLevelRecord) -> AgentLevelRecord:
        m = AgentLevelModel(
            agent_id=record.agent_id,
            scope_id=record.scope_id,
            level=record.level.value,
            is_active=record.is_active,
            created_by=record.created_by,
        )
        if record.created_at is not None:
            m.created_at = record.created_at
        self._s.add(m)
        await self._s.flush()
        record.id = m.id
        return record

    async def deactivate(self, record_id: int, updated_by: int, updated_at: datetime) -> None:
        await self._s.execute(
            update(AgentLevelModel)
            .where(AgentLevelModel.id == record_id)
            .values(is_active=False, updated_by=updated_by, updated_at=updated_at)
        )
        await self._s.flush()

    async def get_history(self, agent_id: int, scope_id: int) -> list[AgentLevelRecord]:
        result = await self._s.execute(
            select(AgentLevelModel)
            .where(AgentLevelModel.agent_id == agent_id, AgentLevelModel.scope_id == scope_id)
            .order_by(AgentLevelModel.created_at.desc(), AgentLevelModel.id.desc())
        )
        return [_level_to_domain(m) for m in result.scalars()]


class SqlRosterRepository(RosterRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_on_duty_agents(self, work_date: date, scope_id: int | None = None) -> list[Agent]:
        stmt = (
            select(AgentModel)
            .join(DutyRosterModel, DutyRosterModel.agent_id == AgentModel.id)
            .where(
                DutyRosterModel.work_date == work_date,
                DutyRosterModel.is_working.is_(True),
                AgentModel.is_active.is_(True),
            )
            .order_by(DutyRosterModel.id)
        )
        if scope_id is not None:
            stmt = stmt.where(DutyRosterModel.scope_id == scope_id)
        result = await self._s.execute(stmt)

        agents: dict[int, Agent] = {}
        for m in result.scalars():
            agents.setdefault(m.id, _agent_to_domain(m))
        return list(agents.values())

    async def get_entry(self, agent_id: int, work_date: date, scope_id: int) -> DutyAssignment | None:
        result = await self._s.execute(
            select(DutyRosterModel).where(
                DutyRosterModel.agent_id == agent_id,
                DutyRosterModel.work_date == work_date,
                DutyRosterModel.scope_id == scope_id,
            )
        )
        m = result.scalar_one_or_none()
        return _duty_to_domain(m) if m else None

    async def save(self, entry: DutyAssignment) -> DutyAssignment:
        m = DutyRosterModel(
            agent_id=entry.agent_id,
            work_date=entry.work_date,
            scope_id=entry.scope_id,
            is_working=entry.is_working,
            is_locked=entry.is_locked,
            created_by=entry.created_by,
        )
        self._s.add(m)
        await self._s.flush()
        entry.id = m.id
        return entry

    async def update(self, entry: DutyAssignment) -> DutyAssignment:
        await self._s.execute(
            update(DutyRosterModel)
            .where(DutyRosterModel.id == entry.id)
            .values(is_working=entry.is_working, is_locked=entry.is_locked)
        )
        await self._s.flush()
        return entry

    async def delete(self, entry_id: int) -> None:
        await self._s.execute(delete(DutyRosterModel).where(DutyRosterModel.id == entry_id))
        await self._s.flush()

    async def lock(self, work_date: date, scope_id: int) -> int:
        result = await self._s.execute(
            update(DutyRosterModel)
            .where(
                DutyRosterModel.work_date == work_date,
                DutyRosterModel.scope_id == scope_id,
                DutyRosterModel.is_locked.is_(False),
            )
            .values(is_locked=True)
        )
        await self._s.flush()
        return result.rowcount


class SqlCaseRepository(CaseRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, case: CollectionCase) -> CollectionCase:
        m = CollectionCaseModel(
            scope_id=case.scope_id,
            contract_no=case.contract_no,
            dpd=case.dpd,
            status=case.status.value,
            assigned_to=case.assigned_to,
            assigned_by=case.assigned_by,
            assigned_at=case.assigned_at,
        )
        self._s.add(m)
        await self._s.flush()
        case.id = m.id
        return case

    async def get_by_id(self, case_id: int) -> CollectionCase | None:
        m = await self._s.get(CollectionCaseModel, case_id)
        return _case_to_domain(m) if m else None

    async def get_unassigned_for_scope(self, scope_id: int) -> list[CollectionCase]:
        result = await self._s.execute(
            select(CollectionCaseModel)
            .where(
                CollectionCaseModel.scope_id == scope_id,
                CollectionCaseModel.assigned_to.is_(None),
            )
            .order_by(CollectionCaseModel.dpd, CollectionCaseModel.id)
        )
        return [_case_to_domain(m) for m in result.scalars()]

    async def get_oldest_unassigned(
        self, limit: int, exclude_scope_id: int | None = None
    ) -> list[CollectionCase]:
        stmt = select(CollectionCaseModel).where(
            CollectionCaseModel.assigned_to.is_(None),
            CollectionCaseModel.status != CaseStatus.COMPLETED.value,
        )
        if exclude_scope_id is not None:
            stmt = stmt.where(CollectionCaseModel.scope_id != exclude_scope_id)
        result = await self._s.execute(
            stmt
            .order_by(CollectionCaseModel.created_at, CollectionCaseModel.id)
            .limit(limit)
        )
        return [_case_to_domain(m) for m in result.scalars()]

    async def count_unassigned(self, scope_id: int) -> int:
        result = await self._s.execute(
            select(func.count(CollectionCaseModel.id)).where(
                CollectionCaseModel.scope_id == scope_id,
                CollectionCaseModel.assigned_to.is_(None),
            )
        )
        return result.scalar() or 0

    async def claim(
        self,
        case_id: int,
        agent_auth_id: int,
        assigned_by: int,
        assigned_at: datetime,
    ) -> bool:
        result = await self._s.execute(
            update(CollectionCaseModel)
            .where(
                CollectionCaseModel.id == case_id,
                CollectionCaseModel.assigned_to.is_(None),
            )
            .values(
                assigned_to=agent_auth_id,
                assigned_by=assigned_by,
                assigned_at=assigned_at,
                status=CaseStatus.ASSIGNED.value,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class SqlLevelConfigRepository(LevelConfigRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_by_id(self, config_id: int) -> LevelConfig | None:
        m = await self._s.get(LevelConfigModel, config_id)
        return _config_to_domain(m) if m else None

    async def get_active(
        self, scope_id: int, target_date: date, config_type: ConfigType
    ) -> LevelConfig | None:
        result = await self._s.execute(
            select(LevelConfigModel).where(
                LevelConfigModel.scope_id == scope_id,
                LevelConfigModel.target_date == target_date,
                LevelConfigModel.config_type == config_type.value,
                LevelConfigModel.is_active.is_(True),
            )
        )
        m = result.scalar_one_or_none()
        return _config_to_domain(m) if m else None

    async def get_latest_approved_before(self, scope_id: int, target_date: date) -> LevelConfig | None:
        result = await self._s.execute(
            select(LevelConfigModel)
            .where(
                LevelConfigModel.scope_id == scope_id,
                LevelConfigModel.target_date < target_date,
                LevelConfigModel.config_type == ConfigType.APPROVED.value,
                LevelConfigModel.is_active.is_(True),
            )
            .order_by(LevelConfigModel.target_date.desc(), LevelConfigModel.id.desc())
            .limit(1)
        )
        m = result.scalar_one_or_none()
        return _config_to_domain(m) if m else None

    async def deactivate(
        self,
        scope_id: int,
        target_date: date,
        config_type: ConfigType,
        exclude_id: int | None = None,
    ) -> int:
        stmt = (
            update(LevelConfigModel)
            .where(
                LevelConfigModel.scope_id == scope_id,
                LevelConfigModel.target_date == target_date,
                LevelConfigModel.config_type == config_type.value,
                LevelConfigModel.is_active.is_(True),
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        if exclude_id is not None:
            stmt = stmt.where(LevelConfigModel.id != exclude_id)
        result = await self._s.execute(stmt)
        await self._s.flush()
        return result.rowcount

    async def save(self, config: LevelConfig) -> LevelConfig:
        m = LevelConfigModel(**_config_values(config))
        self._s.add(m)
        await self._s.flush()
        config.id = m.id
        config.created_at = m.created_at
        return config

    async def update(self, config: LevelConfig) -> LevelConfig:
        await self._s.execute(
            update(LevelConfigModel)
            .where(LevelConfigModel.id == config.id)
            .values(**_config_values(config))
            .execution_options(synchronize_session=False)
        )
        await self._s.flush()
        return config

    async def list_for_scope(
        self,
        scope_id: int,
        config_type: ConfigType | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[LevelConfig]:
        stmt = select(LevelConfigModel).where(LevelConfigModel.scope_id == scope_id)
        if config_type is not None:
            stmt = stmt.where(LevelConfigModel.config_type == config_type.value)
        if date_from is not None:
            stmt = stmt.where(LevelConfigModel.target_date >= date_from)
        if date_to is not None:
            stmt = stmt.where(LevelConfigModel.target_date <= date_to)
        result = await self._s.execute(
            stmt.order_by(LevelConfigModel.target_date.desc(), LevelConfigModel.id.desc())
        )
        return [_config_to_domain(m) for m in result.scalars()]
