"""Unit tests for the wallet, ledger and verification capabilities."""

import asyncio
from decimal import Decimal

import base58
import httpx
import pytest

from src.ns_capability.ledger import (
    SimulatedLedger,
    SolanaRpcLedger,
    new_address,
    new_signature,
)
from src.ns_capability.verification import SimulatedKycGate
from src.ns_capability.wallet import SimulatedWallet, TransferSpec
from src.ns_common.enums import NetworkStatus
from src.ns_common.errors import (
    CapabilityTimeoutError,
    ExternalCapabilityError,
    WalletNotInstalledError,
    WalletRejectedError,
)
from src.ns_listing.domain.models import LoanTerms
from tests.factories import BUYER, CREATOR

TERMS = LoanTerms(
    loan_token="USDC", loan_amount="5000",
    collateral_token="SOL", collateral_amount="100",
    apr="8.5", term_days=30,
)


def _spec(**kwargs) -> TransferSpec:
    defaults = dict(payer=BUYER, payee=CREATOR, amount=Decimal("5000"), token="USDC")
    defaults.update(kwargs)
    return TransferSpec(**defaults)


class TestAddresses:
    def test_address_is_32_bytes_base58(self) -> None:
        assert len(base58.b58decode(new_address())) == 32

    def test_signature_is_64_bytes_base58(self) -> None:
        assert len(base58.b58decode(new_signature())) == 64

    def test_unique(self) -> None:
        assert new_signature() != new_signature()


class TestSimulatedLedger:
    async def test_create_token(self) -> None:
        ledger = SimulatedLedger()
        address = await ledger.create_token(CREATOR, TERMS)
        assert ledger.token_info(address) == (CREATOR, TERMS)

    async def test_transfer_moves_balance(self) -> None:
        ledger = SimulatedLedger(default_balance=Decimal("10000"))
        handle = await ledger.submit_transfer(BUYER, CREATOR, Decimal("2500.5"), "USDC")

        assert handle.amount == "2500.5"
        assert await ledger.get_balance(BUYER, "USDC") == Decimal("7499.5")
        assert await ledger.get_balance(CREATOR, "USDC") == Decimal("12500.5")

    async def test_insufficient_balance(self) -> None:
        ledger = SimulatedLedger(default_balance=Decimal("100"))
        with pytest.raises(ExternalCapabilityError) as exc_info:
            await ledger.submit_transfer(BUYER, CREATOR, Decimal("5000"), "USDC")
        assert "insufficient" in exc_info.value.message
        assert await ledger.get_balance(BUYER, "USDC") == Decimal("100")

    async def test_non_positive_amount(self) -> None:
        with pytest.raises(ExternalCapabilityError):
            await SimulatedLedger().submit_transfer(BUYER, CREATOR, Decimal("0"), "SOL")

    async def test_disconnected(self) -> None:
        ledger = SimulatedLedger()
        ledger.connected = False
        assert await ledger.get_network_status() == NetworkStatus.DISCONNECTED
        with pytest.raises(ExternalCapabilityError):
            await ledger.create_token(CREATOR, TERMS)


def _rpc_ledger(handler) -> SolanaRpcLedger:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SolanaRpcLedger("https://rpc.test", timeout=1.0, client=client)


class TestSolanaRpcLedger:
    async def test_balance_in_sol(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {"value": 2_500_000_000}})

        ledger = _rpc_ledger(handler)
        assert await ledger.get_balance(BUYER) == Decimal("2.5")
        await ledger.close()

    async def test_health(self) -> None:
        ledger = _rpc_ledger(lambda r: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "ok"}))
        assert await ledger.get_network_status() == NetworkStatus.CONNECTED

    async def test_unhealthy_node_reported_disconnected(self) -> None:
        ledger = _rpc_ledger(lambda r: httpx.Response(503))
        assert await ledger.get_network_status() == NetworkStatus.DISCONNECTED

    async def test_rpc_error_body(self) -> None:
        body = {"jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "Invalid param"}}
        ledger = _rpc_ledger(lambda r: httpx.Response(200, json=body))
        with pytest.raises(ExternalCapabilityError) as exc_info:
            await ledger.get_balance("not-an-address")
        assert "Invalid param" in exc_info.value.message

    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(CapabilityTimeoutError):
            await _rpc_ledger(handler).get_balance(BUYER)

    async def test_create_token_survives_failed_airdrop(self) -> None:
        ledger = _rpc_ledger(lambda r: httpx.Response(429))
        address = await ledger.create_token(CREATOR, TERMS)
        assert ledger.token_info(address) == (CREATOR, TERMS)


class TestSimulatedWallet:
    async def test_connect(self) -> None:
        wallet = SimulatedWallet(SimulatedLedger(), [BUYER])
        conn = await wallet.connect("Phantom")
        assert conn.address == BUYER
        assert conn.provider == "phantom"

    async def test_not_installed(self) -> None:
        wallet = SimulatedWallet(SimulatedLedger(), [BUYER], installed={"phantom"})
        assert wallet.is_available("solflare") is False
        with pytest.raises(WalletNotInstalledError):
            await wallet.connect("solflare")

    async def test_list_accounts_requires_connection(self) -> None:
        wallet = SimulatedWallet(SimulatedLedger(), [BUYER, CREATOR])
        assert await wallet.list_accounts() == []
        await wallet.connect("backpack")
        assert await wallet.list_accounts() == [BUYER, CREATOR]

    async def test_account_change_listeners(self) -> None:
        wallet = SimulatedWallet(SimulatedLedger(), [BUYER])
        seen: list[str | None] = []
        wallet.on_account_change(seen.append)

        await wallet.connect("phantom")
        wallet.switch_account(CREATOR)
        await wallet.disconnect()

        assert seen == [BUYER, CREATOR, None]

    async def test_sign_and_submit(self) -> None:
        wallet = SimulatedWallet(SimulatedLedger(), [BUYER])
        await wallet.connect("phantom")
        handle = await wallet.sign_and_submit(_spec())
        assert handle.payer == BUYER
        assert handle.payee == CREATOR

    async def test_sign_requires_connection(self) -> None:
        with pytest.raises(ExternalCapabilityError):
            await SimulatedWallet(SimulatedLedger(), [BUYER]).sign_and_submit(_spec())

    async def test_cannot_sign_for_other_account(self) -> None:
        wallet = SimulatedWallet(SimulatedLedger(), [BUYER])
        await wallet.connect("phantom")
        with pytest.raises(WalletRejectedError):
            await wallet.sign_and_submit(_spec(payer=CREATOR))

    async def test_user_rejects(self) -> None:
        wallet = SimulatedWallet(SimulatedLedger(), [BUYER])
        await wallet.connect("phantom")
        wallet.reject_signing = True
        with pytest.raises(WalletRejectedError):
            await wallet.sign_and_submit(_spec())

    async def test_signing_timeout(self) -> None:
        class _StuckLedger(SimulatedLedger):
            async def submit_transfer(self, payer, payee, amount, token):
                await asyncio.sleep(10)

        wallet = SimulatedWallet(_StuckLedger(), [BUYER], sign_timeout=0.01)
        await wallet.connect("phantom")
        with pytest.raises(CapabilityTimeoutError):
            await wallet.sign_and_submit(_spec())

    def test_needs_an_account(self) -> None:
        with pytest.raises(ValueError):
            SimulatedWallet(SimulatedLedger(), [])


class TestSimulatedKycGate:
    async def test_verify_after_delay(self) -> None:
        delays: list[float] = []

        async def fake_sleep(seconds: float) -> None:
            delays.append(seconds)

        gate = SimulatedKycGate(delay=2.0, sleep=fake_sleep)
        assert await gate.is_verified(BUYER) is False
        assert await gate.verify(BUYER) is True
        assert await gate.is_verified(BUYER) is True
        assert delays == [2.0]

    async def test_verification_is_per_actor(self) -> None:
        gate = SimulatedKycGate(delay=0)
        await gate.verify(BUYER)
        assert await gate.is_verified(CREATOR) is False

    async def test_second_verify_skips_delay(self) -> None:
        delays: list[float] = []

        async def fake_sleep(seconds: float) -> None:
            delays.append(seconds)

        gate = SimulatedKycGate(delay=2.0, sleep=fake_sleep)
        await gate.verify(BUYER)
        await gate.verify(BUYER)
        assert delays == [2.0]
