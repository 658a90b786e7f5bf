"""LevelConfig entity — a per-level percentage split for one scope and date."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from callcenter.domain.value_objects.enums import AgentLevel, ConfigType


@dataclass
class LevelConfig:
    id: int | None
    scope_id: int
    target_date: date
    percentages: dict[AgentLevel, float]
    agent_counts: dict[AgentLevel, int] = field(default_factory=dict)
    total_cases: int = 0
    config_type: ConfigType = ConfigType.SUGGESTED
    is_active: bool = True
    is_assigned: bool = False
    based_on_config_id: int | None = None
    remarks: str | None = None
    created_by: int | None = None
    approved_by: int | None = None
    approved_at: datetime | None = None
    assigned_by: int | None = None
    assigned_at: datetime | None = None
    assignments_by_agent: list[dict] | None = None
    created_at: datetime | None = None

    @property
    def total_agents(self) -> int:
        return sum(self.agent_counts.values())

    def is_approved(self) -> bool:
        return self.config_type == ConfigType.APPROVED

    def is_suggested(self) -> bool:
        return self.config_type == ConfigType.SUGGESTED

    def percentage_for(self, level: AgentLevel) -> float:
        return self.percentages.get(level, 0.0)
