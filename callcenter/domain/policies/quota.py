"""QuotaPolicy — split a case count across levels by percentage."""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import TypeVar

K = TypeVar("K", bound=Hashable)

_HUNDRED = Decimal(100)


def _to_decimal(value: float) -> Decimal:
    # str() first so 33.33 stays 33.33 instead of its binary approximation
    return Decimal(str(value))


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def allocate_quota(total: int, percentages: Mapping[K, float]) -> dict[K, int]:
    """Integer share per key that sums exactly to *total*.

    1. Each key gets ``round_half_up(total * pct / 100)``.
    2. Rounding drift is spread one unit at a time over the keys ranked by
       percentage (largest first, declaration order on ties). Keys at zero
       are skipped when removing units, so no share goes negative.

    Args:
        total: number of cases to split, >= 0.
        percentages: key -> percentage in [0, 100]; expected to sum to ~100.

    Returns:
        key -> non-negative int, values summing to *total*.

    Raises:
        ValueError: on a negative total, an out-of-range percentage, or an
            empty mapping with a positive total.
    """
    if total < 0:
        raise ValueError(f"Total must be non-negative, got {total}")
    for key, pct in percentages.items():
        if pct < 0 or pct > 100:
            raise ValueError(f"Percentage for {key!r} out of range: {pct}")
    if not percentages:
        if total:
            raise ValueError("Cannot allocate cases without percentages")
        return {}

    allocations = {
        key: round_half_up(Decimal(total) * _to_decimal(pct) / _HUNDRED)
        for key, pct in percentages.items()
    }

    drift = total - sum(allocations.values())
    if drift == 0:
        return allocations

    # sorted() is stable, so equal percentages keep declaration order
    ranked = sorted(percentages, key=lambda k: -_to_decimal(percentages[k]))

    if drift > 0:
        receivers = [k for k in ranked if percentages[k] > 0] or ranked
        i = 0
        while drift > 0:
            allocations[receivers[i % len(receivers)]] += 1
            drift -= 1
            i += 1
    else:
        excess = -drift
        while excess > 0:
            for key in ranked:
                if excess == 0:
                    break
                if allocations[key] > 0:
                    allocations[key] -= 1
                    excess -= 1

    return allocations
