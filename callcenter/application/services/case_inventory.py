"""CaseInventory — unassigned cases available to an assignment run."""

from __future__ import annotations

from callcenter.application.ports.case_repo import CaseRepository
from callcenter.domain.entities.case import CollectionCase


class CaseInventory:
    def __init__(self, case_repo: CaseRepository):
        self._cases = case_repo

    async def unassigned_by_dpd(self, scope_id: int) -> dict[int, list[CollectionCase]]:
        """dpd -> cases, buckets in ascending DPD, cases by id within a bucket."""
        buckets: dict[int, list[CollectionCase]] = {}
        for case in await self._cases.get_unassigned_for_scope(scope_id):
            buckets.setdefault(case.dpd, []).append(case)
        return {dpd: buckets[dpd] for dpd in sorted(buckets)}

    async def oldest_unassigned(
        self, limit: int, exclude_scope_id: int | None = None
    ) -> list[CollectionCase]:
        return await self._cases.get_oldest_unassigned(limit, exclude_scope_id)

    async def count_unassigned(self, scope_id: int) -> int:
        return await self._cases.count_unassigned(scope_id)
