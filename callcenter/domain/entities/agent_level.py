"""AgentLevelRecord — one entry of an agent's per-scope level history."""

from dataclasses import dataclass
from datetime import datetime

from callcenter.domain.value_objects.enums import AgentLevel


@dataclass
class AgentLevelRecord:
    id: int | None
    agent_id: int
    scope_id: int
    level: AgentLevel
    is_active: bool = True
    created_by: int | None = None
    created_at: datetime | None = None
    updated_by: int | None = None
    updated_at: datetime | None = None
