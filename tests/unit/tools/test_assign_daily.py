"""Tests for the scheduled daily assignment command."""

from __future__ import annotations

from datetime import date

import pytest

from callcenter.application.use_cases.assign_round_robin import SimpleRunResult
from callcenter.domain.exceptions import NoAgentsAvailableError
from callcenter.tools import assign_daily


class FakeSession:
    def __init__(self):
        self.commits = 0
        self.rollbacks = 0

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def _install(monkeypatch, outcome):
    """Swap the session factory and use case; returns the fake session."""
    session = FakeSession()
    calls = []

    class StubUseCase:
        def __init__(self, **kwargs):
            pass

        async def execute(self, assigned_by, assignment_date=None):
            calls.append((assigned_by, assignment_date))
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

    monkeypatch.setattr(assign_daily, "async_session_factory", lambda: session)
    monkeypatch.setattr(assign_daily, "AssignRoundRobinUseCase", StubUseCase)
    return session, calls


def _result() -> SimpleRunResult:
    return SimpleRunResult(
        assignment_date=date(2025, 9, 1),
        total_cases=3,
        total_agents=2,
        assignments=[{"case_id": i} for i in range(3)],
        summary=[
            {"agent_id": 1, "name": "Ana", "count": 2},
            {"agent_id": 2, "name": "Ben", "count": 1},
        ],
    )


@pytest.mark.asyncio
async def test_success_commits_and_prints(monkeypatch, capsys):
    session, calls = _install(monkeypatch, _result())

    code = await assign_daily.run(date(2025, 9, 1), assigned_by=5)

    assert code == 0
    assert session.commits == 1
    assert calls == [(5, date(2025, 9, 1))]
    out = capsys.readouterr().out
    assert "Total assignments made: 3" in out
    assert "Average cases per agent: 1.5" in out


@pytest.mark.asyncio
async def test_nothing_to_do_exits_cleanly(monkeypatch):
    session, _ = _install(monkeypatch, NoAgentsAvailableError())

    assert await assign_daily.run(None, assigned_by=0) == 0
    assert session.commits == 0


@pytest.mark.asyncio
async def test_failure_rolls_back(monkeypatch):
    session, _ = _install(monkeypatch, RuntimeError("db down"))

    assert await assign_daily.run(None, assigned_by=0) == 1
    assert session.rollbacks == 1
    assert session.commits == 0
