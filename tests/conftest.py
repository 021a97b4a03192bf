"""Shared test fixtures."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from src.main import create_app
from src.ns_capability.ledger import SimulatedLedger
from src.ns_capability.verification import SimulatedKycGate
from src.ns_listing.infrastructure.memory_store import InMemoryListingStore


async def no_sleep(_: float) -> None:
    return None


@pytest.fixture
def test_settings() -> Settings:
    return Settings(SEED_EXAMPLE_LISTINGS=False, KYC_DELAY_SECONDS=0, LEDGER_BACKEND="simulated")


@pytest.fixture
def store() -> InMemoryListingStore:
    return InMemoryListingStore()


@pytest.fixture
def kyc_gate() -> SimulatedKycGate:
    return SimulatedKycGate(delay=0, sleep=no_sleep)


@pytest.fixture
def app(test_settings, store, kyc_gate) -> FastAPI:
    """App over an isolated, empty store."""
    return create_app(cfg=test_settings, store=store, ledger=SimulatedLedger(), kyc_gate=kyc_gate)


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
