"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class AgentLevel(str, Enum):
    TEAM_LEADER = "team-leader"
    SENIOR = "senior"
    MID_LEVEL = "mid-level"
    JUNIOR = "junior"

    @classmethod
    def ordered(cls) -> tuple["AgentLevel", ...]:
        """Staffed levels, most senior first. Iteration order everywhere."""
        return (cls.TEAM_LEADER, cls.SENIOR, cls.MID_LEVEL, cls.JUNIOR)


# Label used in summaries for agents with no active level in the scope
UNLEVELED = "unleveled"


class ConfigType(str, Enum):
    SUGGESTED = "suggested"
    APPROVED = "approved"


class CaseStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    COMPLETED = "completed"
