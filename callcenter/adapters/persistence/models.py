"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from callcenter.adapters.persistence.database import Base


class AgentModel(Base):
    __tablename__ = "agents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    auth_user_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    duties: Mapped[list["DutyRosterModel"]] = relationship(back_populates="agent")
    levels: Mapped[list["AgentLevelModel"]] = relationship(back_populates="agent")


class AgentLevelModel(Base):
    __tablename__ = "agent_levels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    agent_id: Mapped[int] = mapped_column(Integer, ForeignKey("agents.id"), nullable=False)
    scope_id: Mapped[int] = mapped_column(Integer, nullable=False)
    level: Mapped[str] = mapped_column(String(20), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    agent: Mapped["AgentModel"] = relationship(back_populates="levels")

    __table_args__ = (
        Index(
            "uq_agent_levels_active", "agent_id", "scope_id",
            unique=True, postgresql_where=text("is_active"),
        ),
    )


class DutyRosterModel(Base):
    __tablename__ = "duty_rosters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    agent_id: Mapped[int] = mapped_column(Integer, ForeignKey("agents.id"), nullable=False)
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    scope_id: Mapped[int] = mapped_column(Integer, nullable=False)
    is_working: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    agent: Mapped["AgentModel"] = relationship(back_populates="duties")

    __table_args__ = (
        UniqueConstraint("agent_id", "work_date", "scope_id", name="uq_duty_rosters_agent_date_scope"),
        Index("idx_duty_rosters_date_scope", "work_date", "scope_id"),
    )


class CollectionCaseModel(Base):
    __tablename__ = "collection_cases"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    scope_id: Mapped[int] = mapped_column(Integer, nullable=False)
    contract_no: Mapped[str] = mapped_column(String(50), nullable=False)
    dpd: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    assigned_to: Mapped[int | None] = mapped_column(Integer, nullable=True)
    assigned_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    assigned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_collection_cases_scope_unassigned", "scope_id", "assigned_to", "dpd"),
        Index("idx_collection_cases_created", "created_at"),
    )


class LevelConfigModel(Base):
    __tablename__ = "level_configs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    scope_id: Mapped[int] = mapped_column(Integer, nullable=False)
    target_date: Mapped[date] = mapped_column(Date, nullable=False)

    team_leader_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    senior_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    mid_level_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    junior_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_agents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_cases: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    team_leader_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    senior_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    mid_level_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    junior_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)

    config_type: Mapped[str] = mapped_column(String(20), nullable=False, default="suggested")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_assigned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    based_on_config_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("level_configs.id"), nullable=True
    )

    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    approved_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    assigned_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    assigned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    assignments_by_agent: Mapped[list | None] = mapped_column(JSONB, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    based_on: Mapped["LevelConfigModel | None"] = relationship(remote_side=[id])

    __table_args__ = (
        Index(
            "uq_level_configs_active", "scope_id", "target_date", "config_type",
            unique=True, postgresql_where=text("is_active"),
        ),
        Index("idx_level_configs_scope_date", "scope_id", "target_date"),
    )
