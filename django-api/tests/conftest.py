"""Pytest configuration and shared fixtures."""

import random

import pytest
from rest_framework.test import APIClient

from matchday.domain import GamificationRule
from matchday.services import EventService, FinanceService, PlayerService
from matchday.stores import Stores
from matchday.stores.memory_store import MemoryDatabase, memory_stores
from tests.builders import NOW


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def db_state() -> MemoryDatabase:
    return MemoryDatabase()


@pytest.fixture
def stores(db_state: MemoryDatabase) -> Stores:
    return memory_stores(db_state)


@pytest.fixture
def gamification_rules(db_state: MemoryDatabase) -> list[GamificationRule]:
    db_state.rules = [
        GamificationRule(id="g_kill", name="XP per Kill", xp=10),
        GamificationRule(id="g_headshot", name="XP per Headshot", xp=25),
        GamificationRule(id="g_death", name="XP Loss per Death", xp=-5),
        GamificationRule(id="g_game", name="Base XP per Game", xp=100),
    ]
    return db_state.rules


@pytest.fixture
def event_service(stores: Stores) -> EventService:
    return EventService(stores, rng=random.Random(7), now=lambda: NOW)


@pytest.fixture
def player_service(stores: Stores) -> PlayerService:
    return PlayerService(stores, now=lambda: NOW)


@pytest.fixture
def finance_service(stores: Stores) -> FinanceService:
    return FinanceService(stores)
