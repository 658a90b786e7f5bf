"""CaseAssignment — the transient result of routing a case to an agent."""

from dataclasses import dataclass

from callcenter.domain.entities.agent import Agent
from callcenter.domain.entities.case import CollectionCase


@dataclass(frozen=True)
class CaseAssignment:
    case: CollectionCase
    agent: Agent
    level: str  # the level whose quota placed the case, or the agent's own level for leftovers
    leftover: bool = False

    @property
    def dpd(self) -> int:
        return self.case.dpd
