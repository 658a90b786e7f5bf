"""DutyAssignment entity — an agent's roster entry for one date and scope."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class DutyAssignment:
    id: int | None
    agent_id: int
    work_date: date
    scope_id: int
    is_working: bool = True
    is_locked: bool = False
    created_by: int | None = None

    def can_be_removed(self, now: datetime, cutoff_hour: int) -> bool:
        """Entries stay editable until the cutoff hour of their own date.

        Past dates and locked entries (already used by an assignment run)
        are frozen.
        """
        if self.is_locked:
            return False
        today = now.date()
        if self.work_date < today:
            return False
        if self.work_date == today:
            return now.hour < cutoff_hour
        return True
