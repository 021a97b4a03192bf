"""Integration-test fixtures.

The default ``client`` (tests/conftest.py) talks to an app over an empty
store. ``seeded_client`` runs the startup path that loads the example
listings, on its own store so tests stay independent.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from src.main import create_app
from src.ns_capability.ledger import SimulatedLedger


@pytest.fixture
async def seeded_client() -> AsyncClient:
    app = create_app(cfg=Settings(KYC_DELAY_SECONDS=0), ledger=SimulatedLedger())
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def kyc_client(kyc_gate) -> AsyncClient:
    """App with the verification gate enforced server-side."""
    cfg = Settings(SEED_EXAMPLE_LISTINGS=False, KYC_DELAY_SECONDS=0, KYC_ENFORCED=True)
    app = create_app(cfg=cfg, ledger=SimulatedLedger(), kyc_gate=kyc_gate)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
