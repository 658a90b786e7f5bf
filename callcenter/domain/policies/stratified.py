"""StratifiedPolicy — spread each level's quota across DPD buckets.

Without stratification the first level to be served would take every case
of the lowest DPD band. Here each bucket is split by the same percentages,
clamped by what the level still has left of its global quota, and then
reconciled so every level ends up with exactly its global quota.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from callcenter.domain.entities.case import CollectionCase
from callcenter.domain.policies.quota import allocate_quota
from callcenter.domain.value_objects.enums import AgentLevel

# level -> dpd -> number of cases
LevelDpdAllocation = dict[AgentLevel, dict[int, int]]


def allocate_by_dpd(
    cases_by_dpd: Mapping[int, Sequence[CollectionCase]],
    percentages: Mapping[AgentLevel, float],
    global_quota: Mapping[AgentLevel, int] | None = None,
) -> LevelDpdAllocation:
    """Compute how many cases of each DPD bucket every level receives.

    Buckets are always walked in ascending DPD order; the result is
    deterministic for a given input.

    Args:
        cases_by_dpd: dpd -> cases in that bucket.
        percentages: level -> percentage.
        global_quota: level -> total cases for the level. Computed from the
            overall case count when omitted.

    Returns:
        level -> dpd -> count. Every level in *percentages* and every bucket
        in *cases_by_dpd* is present.
    """
    buckets = sorted(cases_by_dpd)
    sizes = {dpd: len(cases_by_dpd[dpd]) for dpd in buckets}
    levels = list(percentages)

    if global_quota is None:
        global_quota = allocate_quota(sum(sizes.values()), percentages)
    target = {level: global_quota.get(level, 0) for level in levels}

    remaining = dict(target)
    allocation: LevelDpdAllocation = {level: {dpd: 0 for dpd in buckets} for level in levels}

    for dpd in buckets:
        local = allocate_quota(sizes[dpd], percentages)
        for level in levels:
            take = max(0, min(local[level], remaining[level]))
            allocation[level][dpd] = take
            remaining[level] -= take

    reconcile_to_quota(allocation, target, sizes)
    return allocation


def reconcile_to_quota(
    allocation: LevelDpdAllocation,
    target: Mapping[AgentLevel, int],
    sizes: Mapping[int, int],
) -> LevelDpdAllocation:
    """Adjust *allocation* in place so each level's sum matches *target*.

    All removals happen before any additions so capacity released by an
    over-allocated level can be claimed by a short one.

    - Over target: take units back from the level's largest buckets first.
    - Under target: claim unallocated cases, fullest buckets first.

    A level stays short only when the buckets run out of cases.
    """
    buckets = sorted(sizes)

    for level, per_dpd in allocation.items():
        excess = sum(per_dpd.values()) - target.get(level, 0)
        if excess <= 0:
            continue
        for dpd in sorted(buckets, key=lambda d: (-per_dpd[d], d)):
            if excess <= 0:
                break
            take = min(excess, per_dpd[dpd])
            per_dpd[dpd] -= take
            excess -= take

    for level, per_dpd in allocation.items():
        short = target.get(level, 0) - sum(per_dpd.values())
        if short <= 0:
            continue
        unclaimed = {
            dpd: sizes[dpd] - sum(other[dpd] for other in allocation.values())
            for dpd in buckets
        }
        for dpd in sorted(buckets, key=lambda d: (-unclaimed[d], d)):
            if short <= 0:
                break
            take = min(short, unclaimed[dpd])
            if take > 0:
                per_dpd[dpd] += take
                short -= take

    return allocation


def level_totals(allocation: LevelDpdAllocation) -> dict[AgentLevel, int]:
    return {level: sum(per_dpd.values()) for level, per_dpd in allocation.items()}
