"""Pytest configuration and fixtures for HabitOwl tests."""

import asyncio
import random

import pytest

from habitowl.config.ad_units import AdUnitRegistry
from habitowl.models.core import Platform
from habitowl.sdk.base import Available
from habitowl.sdk.simulated import SimulatedAdsSdk
from habitowl.services.ad_service import AdService
from habitowl.storage.memory_backend import MemoryBackend


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def settle(rounds: int = 10) -> None:
    """Let scheduled SDK callbacks and event watchers run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
async def storage():
    """Create a connected in-memory preference store."""
    backend = MemoryBackend()
    await backend.connect()
    yield backend
    await backend.disconnect()


@pytest.fixture
def sdk() -> SimulatedAdsSdk:
    """Create a simulated ad network that always fills."""
    return SimulatedAdsSdk()


@pytest.fixture
def registry() -> AdUnitRegistry:
    """Create a registry with the production ad units."""
    return AdUnitRegistry()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def ad_service(storage, sdk, registry, clock):
    """Create an initialized ad service for a free Android user."""
    service = AdService(
        storage,
        Available(sdk=sdk),
        registry,
        platform=Platform.ANDROID,
        clock=clock,
        rng=random.Random(7),
        refill_delay=0.0,
    )
    await service.initialize()
    await settle()
    yield service
    await service.aclose()
