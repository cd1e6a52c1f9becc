"""Shared fakes for the stats server tests."""

import asyncio

import pytest

from stats_server.models import ActionTally, CountSample, StatsPayload

SCENARIO_JSON = (
    b'{"counts":[{"g":5,"s":100,"d":"2024-01-01"}],'
    b'"action_counts":[{"a":"launch","c":3}]}'
)


def scenario_payload() -> StatsPayload:
    return StatsPayload(
        counts=[CountSample(guild_count=5, subscribed_count=100, date="2024-01-01")],
        action_counts=[ActionTally(action="launch", count=3)],
    )


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGenerator:
    """Stands in for StatsGenerator; counts calls and can block or fail."""

    def __init__(self, payload: StatsPayload | None = None):
        self.payload = payload or scenario_payload()
        self.error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.calls = 0
        self.timeouts: list[float] = []

    async def generate(self, timeout: float) -> StatsPayload:
        self.calls += 1
        self.timeouts.append(timeout)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.payload


class FakeConnection:
    def __init__(self, results: list[list[dict]]):
        self.results = list(results)
        self.queries: list[tuple[str, tuple]] = []

    async def fetch(self, query: str, *args):
        self.queries.append((query, args))
        return self.results.pop(0)

    async def fetchval(self, query: str, *args):
        self.queries.append((query, args))
        return 1


class _Acquire:
    def __init__(self, conn: FakeConnection):
        self.conn = conn

    async def __aenter__(self) -> FakeConnection:
        return self.conn

    async def __aexit__(self, *exc) -> bool:
        return False


class FakePool:
    def __init__(self, conn: FakeConnection | None = None):
        self.conn = conn or FakeConnection([])
        self.acquired = 0
        self.closed = False

    def acquire(self, timeout: float | None = None) -> _Acquire:
        self.acquired += 1
        return _Acquire(self.conn)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()
