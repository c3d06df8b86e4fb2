"""Shared pytest fixtures for test modules."""

from __future__ import annotations

from typing import Any

import pytest

from fifa_tracker.cache.memory_store import MemoryCacheStore
from fifa_tracker.data.manager import DataManager
from fifa_tracker.data.retry import RetryExecutor
from fifa_tracker.db.connection import ConnectionMonitor
from tests.fakes.database import FakeDatabaseClient
from tests.fakes.timing import FakeClock, RecordingSleep

SAMPLE_TABLES: dict[str, list[dict[str, Any]]] = {
    "players": [
        {"id": 1, "name": "Max Müller", "team": "AEK", "position": "ST", "goals": 5, "value": 15.5},
        {"id": 2, "name": "Tom Schmidt", "team": "AEK", "position": "TH", "goals": 0, "value": 8.2},
        {"id": 4, "name": "Jan Becker", "team": "Real", "position": "ST", "goals": 7, "value": 18.3},
    ],
    "matches": [
        {
            "id": 1,
            "date": "2024-01-15",
            "teama": "AEK",
            "teamb": "Real",
            "goalsa": 2,
            "goalsb": 1,
            "goalslista": '[{"player": "Max Müller", "player_id": 1, "count": 2}]',
            "goalslistb": [{"player": "Jan Becker", "player_id": 4, "count": 1}],
        },
        {
            "id": 2,
            "date": "2024-01-10",
            "teama": "AEK",
            "teamb": "Real",
            "goalsa": 0,
            "goalsb": 0,
            "goalslista": None,
            "goalslistb": "[]",
        },
    ],
    "bans": [
        {"id": 1, "player_id": 1, "team": "AEK", "type": "Gelb-Rote Karte", "totalgames": 1, "matchesserved": 0},
    ],
    "finances": [
        {"id": 1, "team": "AEK", "balance": 25000, "debt": 0},
        {"id": 2, "team": "Real", "balance": 18000, "debt": 2000},
    ],
    "transactions": [
        {"id": 1, "amount": 5000, "info": "Siegprämie", "team": "AEK", "date": "2024-01-15", "type": "Preisgeld"},
        {"id": 2, "amount": -2000, "info": "Kartenstrafe", "team": "Real", "date": "2024-01-10", "type": "Strafe"},
    ],
    "spieler_des_spiels": [
        {"id": 1, "name": "Max Müller", "team": "AEK", "count": 1},
    ],
    "managers": [
        {"id": 2, "name": "Beta", "gewicht": 90},
        {"id": 1, "name": "Alpha", "gewicht": 80},
    ],
}


@pytest.fixture
def fake_db() -> FakeDatabaseClient:
    return FakeDatabaseClient(SAMPLE_TABLES)


@pytest.fixture
def sleeps() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def monitor() -> ConnectionMonitor:
    return ConnectionMonitor()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCacheStore:
    return MemoryCacheStore(clock=clock)


@pytest.fixture
def manager(
    fake_db: FakeDatabaseClient,
    cache: MemoryCacheStore,
    sleeps: RecordingSleep,
    monitor: ConnectionMonitor,
) -> DataManager:
    """A DataManager over the in-memory database with instant backoff."""
    return DataManager(fake_db, cache=cache, retry=RetryExecutor(monitor, sleep=sleeps), connectivity=monitor)
