"""Ledger capability — token minting, value transfer and balance lookups.

SimulatedLedger keeps balances in memory and returns base58 addresses and
signatures shaped like Solana's. SolanaRpcLedger reads balance and health
from a real RPC node over JSON-RPC and keeps minting/transfers simulated,
which is how the devnet demo behaves.
"""

import logging
import secrets
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol

import base58
import httpx

from src.ns_common.datetime_utils import utc_now
from src.ns_common.enums import NetworkStatus
from src.ns_common.errors import CapabilityTimeoutError, ExternalCapabilityError
from src.ns_listing.domain.models import LoanTerms

logger = logging.getLogger(__name__)

LAMPORTS_PER_SOL = Decimal(1_000_000_000)
# Seed balance for addresses the simulated ledger has not seen yet.
DEFAULT_SIMULATED_BALANCE = Decimal("1000000")
TOKEN_AIRDROP_SOL = Decimal("0.01")


@dataclass(frozen=True)
class TransactionHandle:
    signature: str
    payer: str
    payee: str
    amount: str
    token: str
    submitted_at: str


class LedgerCapability(Protocol):
    async def create_token(self, creator_address: str, terms: LoanTerms) -> str: ...

    async def submit_transfer(
        self, payer: str, payee: str, amount: Decimal, token: str
    ) -> TransactionHandle: ...

    async def get_balance(self, address: str, token: str = "SOL") -> Decimal: ...

    async def get_network_status(self) -> NetworkStatus: ...


def new_address() -> str:
    """Random 32-byte public-key-shaped address."""
    return base58.b58encode(secrets.token_bytes(32)).decode()


def new_signature() -> str:
    """Random 64-byte transaction-signature-shaped string."""
    return base58.b58encode(secrets.token_bytes(64)).decode()


class SimulatedLedger:
    def __init__(self, default_balance: Decimal = DEFAULT_SIMULATED_BALANCE) -> None:
        self._default_balance = default_balance
        self._balances: dict[str, dict[str, Decimal]] = defaultdict(dict)
        self._tokens: dict[str, tuple[str, LoanTerms]] = {}
        self.connected = True

    def _ensure_connected(self) -> None:
        if not self.connected:
            raise ExternalCapabilityError("ledger", "network unavailable")

    def _balance(self, address: str, token: str) -> Decimal:
        return self._balances[address].get(token, self._default_balance)

    def token_info(self, token_address: str) -> tuple[str, LoanTerms] | None:
        return self._tokens.get(token_address)

    async def create_token(self, creator_address: str, terms: LoanTerms) -> str:
        self._ensure_connected()
        address = new_address()
        self._tokens[address] = (creator_address, terms)
        logger.info("Loan token %s minted for %s", address, creator_address)
        return address

    async def submit_transfer(
        self, payer: str, payee: str, amount: Decimal, token: str
    ) -> TransactionHandle:
        self._ensure_connected()
        if amount <= 0:
            raise ExternalCapabilityError("ledger", f"invalid transfer amount {amount}")
        available = self._balance(payer, token)
        if available < amount:
            raise ExternalCapabilityError(
                "ledger", f"insufficient {token}: required {amount}, available {available}"
            )
        self._balances[payer][token] = available - amount
        self._balances[payee][token] = self._balance(payee, token) + amount
        handle = TransactionHandle(
            signature=new_signature(),
            payer=payer,
            payee=payee,
            amount=str(amount),
            token=token,
            submitted_at=utc_now().isoformat(),
        )
        logger.info("Transfer %s %s %s -> %s (%s)", amount, token, payer, payee, handle.signature)
        return handle

    async def get_balance(self, address: str, token: str = "SOL") -> Decimal:
        self._ensure_connected()
        return self._balance(address, token)

    async def get_network_status(self) -> NetworkStatus:
        return NetworkStatus.CONNECTED if self.connected else NetworkStatus.DISCONNECTED


class SolanaRpcLedger(SimulatedLedger):
    """Balance and health from a Solana JSON-RPC endpoint."""

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__()
        self._rpc_url = rpc_url
        self._timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._request_id = 0

    async def _rpc(self, method: str, params: list[Any] | None = None) -> Any:
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params or [],
        }
        try:
            resp = await self._client.post(self._rpc_url, json=payload)
            resp.raise_for_status()
        except httpx.TimeoutException as e:
            raise CapabilityTimeoutError("ledger", self._timeout) from e
        except httpx.HTTPError as e:
            raise ExternalCapabilityError("ledger", f"{method} failed: {e}") from e
        body = resp.json()
        if "error" in body:
            raise ExternalCapabilityError("ledger", f"{method}: {body['error'].get('message')}")
        return body.get("result")

    async def get_balance(self, address: str, token: str = "SOL") -> Decimal:
        if token != "SOL":
            return await super().get_balance(address, token)
        result = await self._rpc("getBalance", [address])
        return Decimal(result["value"]) / LAMPORTS_PER_SOL

    async def get_network_status(self) -> NetworkStatus:
        try:
            result = await self._rpc("getHealth")
        except ExternalCapabilityError as e:
            logger.warning("Ledger health check failed: %s", e.message)
            return NetworkStatus.DISCONNECTED
        return NetworkStatus.CONNECTED if result == "ok" else NetworkStatus.DISCONNECTED

    async def create_token(self, creator_address: str, terms: LoanTerms) -> str:
        address = await super().create_token(creator_address, terms)
        # Fund the new address so it shows up on the explorer; failure is not fatal.
        lamports = int(TOKEN_AIRDROP_SOL * LAMPORTS_PER_SOL)
        try:
            await self._rpc("requestAirdrop", [address, lamports])
        except ExternalCapabilityError as e:
            logger.warning("Airdrop to token %s failed: %s", address, e.message)
        return address

    async def close(self) -> None:
        await self._client.aclose()
