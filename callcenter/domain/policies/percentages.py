"""PercentagePolicy — derive and validate level percentage splits."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal

from callcenter.domain.exceptions import InvalidPercentagesError
from callcenter.domain.value_objects.enums import AgentLevel

# Relative weight of one agent per level: team-leader : senior : mid-level : junior
BASE_RATIO: dict[AgentLevel, int] = {
    AgentLevel.TEAM_LEADER: 24,
    AgentLevel.SENIOR: 37,
    AgentLevel.MID_LEVEL: 22,
    AgentLevel.JUNIOR: 17,
}

_CENT = Decimal("0.01")
_HUNDRED = Decimal(100)


def suggest_percentages(agent_counts: Mapping[AgentLevel, int]) -> dict[AgentLevel, float]:
    """Weight each level's share of the roster by its base ratio.

    ``weight = count / total_agents * BASE_RATIO[level]``, normalised to 100
    and rounded to two decimals. Rounding drift goes to the largest
    percentage so the split sums to exactly 100.00.

    Raises:
        ValueError: if no agent is counted.
    """
    counts = {level: max(0, agent_counts.get(level, 0)) for level in AgentLevel.ordered()}
    total_agents = sum(counts.values())
    if total_agents == 0:
        raise ValueError("Cannot suggest percentages without agents")

    weights = {
        level: Decimal(count) / Decimal(total_agents) * BASE_RATIO[level]
        for level, count in counts.items()
    }
    total_weight = sum(weights.values())

    pct = {
        level: (weight / total_weight * _HUNDRED).quantize(_CENT, rounding=ROUND_HALF_UP)
        for level, weight in weights.items()
    }

    diff = _HUNDRED - sum(pct.values())
    if diff:
        largest = max(AgentLevel.ordered(), key=lambda level: pct[level])
        pct[largest] += diff

    return {level: float(value) for level, value in pct.items()}


def validate_percentages(
    percentages: Mapping[AgentLevel, float],
    tolerance: float = 0.01,
) -> dict[AgentLevel, float]:
    """Check a manual split: every level present, each in [0, 100], sum 100.

    Returns:
        the split keyed in level order.

    Raises:
        InvalidPercentagesError: describing the first problem found.
    """
    missing = [level.value for level in AgentLevel.ordered() if level not in percentages]
    if missing:
        raise InvalidPercentagesError(f"Missing percentages for: {', '.join(missing)}")

    for level in AgentLevel.ordered():
        value = percentages[level]
        if value < 0 or value > 100:
            raise InvalidPercentagesError(
                f"Percentage for {level.value} must be between 0 and 100, got {value}"
            )

    total = sum(Decimal(str(percentages[level])) for level in AgentLevel.ordered())
    if abs(total - _HUNDRED) > Decimal(str(tolerance)):
        raise InvalidPercentagesError(f"Total percentage must equal 100%. Current: {total}%")

    return {level: float(percentages[level]) for level in AgentLevel.ordered()}
