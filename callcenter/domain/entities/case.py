"""CollectionCase entity — one overdue contract waiting for a phone call."""

from dataclasses import dataclass
from datetime import datetime

from callcenter.domain.value_objects.enums import CaseStatus


@dataclass
class CollectionCase:
    id: int | None
    scope_id: int
    contract_no: str
    dpd: int
    status: CaseStatus = CaseStatus.PENDING
    assigned_to: int | None = None
    assigned_by: int | None = None
    assigned_at: datetime | None = None
    created_at: datetime | None = None

    def is_assigned(self) -> bool:
        return self.assigned_to is not None

    def mark_assigned(self, agent_auth_id: int, assigned_by: int, at: datetime) -> None:
        self.assigned_to = agent_auth_id
        self.assigned_by = assigned_by
        self.assigned_at = at
        self.status = CaseStatus.ASSIGNED
