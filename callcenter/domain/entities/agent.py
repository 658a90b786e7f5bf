"""Agent entity — a staff member who can be given cases to call."""

from dataclasses import dataclass

from callcenter.domain.value_objects.enums import UNLEVELED, AgentLevel


@dataclass
class Agent:
    id: int | None
    auth_user_id: int
    name: str
    is_active: bool = True
    level: AgentLevel | None = None  # resolved per scope, None on the roster-only path

    @property
    def level_label(self) -> str:
        return self.level.value if self.level else UNLEVELED
