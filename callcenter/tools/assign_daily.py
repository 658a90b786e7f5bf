"""Scheduled daily round-robin assignment.

Usage:
    python -m callcenter.tools.assign_daily
    python -m callcenter.tools.assign_daily --date 2025-09-01
    python -m callcenter.tools.assign_daily --assigned-by 1001
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date

from callcenter.adapters.persistence.database import async_session_factory
from callcenter.adapters.persistence.repositories import SqlCaseRepository, SqlRosterRepository
from callcenter.application.use_cases.assign_round_robin import (
    AssignRoundRobinUseCase,
    SimpleRunResult,
)
from callcenter.config import local_now, settings
from callcenter.domain.exceptions import NothingToDoError

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

# Identity recorded as assigned_by when the scheduler runs unattended
SYSTEM_USER_ID = 0


def _print_results(result: SimpleRunResult) -> None:
    print()
    print(f"Assignment results for {result.assignment_date}")
    print("-" * 61)
    print(f"{'Agent ID':>10}  {'Agent Name':<35}  {'Cases':>10}")
    for row in result.summary:
        print(f"{row['agent_id']:>10}  {row['name']:<35}  {row['count']:>10}")
    print("-" * 61)
    assigned = len(result.assignments)
    print(f"Total assignments made: {assigned}")
    if result.total_agents:
        print(f"Average cases per agent: {assigned / result.total_agents:.1f}")
    if result.conflicts:
        print(f"Skipped (claimed by another run): {result.conflicts}")


async def run(assignment_date: date | None, assigned_by: int) -> int:
    async with async_session_factory() as session:
        uc = AssignRoundRobinUseCase(
            roster_repo=SqlRosterRepository(session),
            case_repo=SqlCaseRepository(session),
            batch_limit=settings.simple_assign_batch_limit,
            leveled_scope_id=settings.default_scope_id,
            clock=local_now,
        )
        try:
            result = await uc.execute(assigned_by, assignment_date)
            await session.commit()
        except NothingToDoError as e:
            logger.warning("Nothing to assign: %s", e.detail)
            return 0
        except Exception:
            await session.rollback()
            logger.exception("Daily case assignment failed")
            return 1

    _print_results(result)
    logger.info("Daily case assignment completed for %s", result.assignment_date)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Assign daily cases to on-duty agents (round robin)")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Date to assign for (YYYY-MM-DD, default: today)",
    )
    parser.add_argument(
        "--assigned-by",
        type=int,
        default=SYSTEM_USER_ID,
        help="Auth user id recorded as the assigner",
    )
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args.date, args.assigned_by)))


if __name__ == "__main__":
    main()
