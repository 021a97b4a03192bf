"""Wallet capability — account connection and transaction signing.

Browser extensions are detected by probing the page for provider objects;
here that detection is the ``installed`` set handed to SimulatedWallet, and
everything else goes through the WalletCapability Protocol.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from src.ns_capability.ledger import LedgerCapability, TransactionHandle
from src.ns_common.enums import WalletProvider
from src.ns_common.errors import (
    CapabilityTimeoutError,
    ExternalCapabilityError,
    WalletNotInstalledError,
    WalletRejectedError,
)

logger = logging.getLogger(__name__)

AccountListener = Callable[[str | None], None]


@dataclass(frozen=True)
class WalletConnection:
    address: str
    provider: str


@dataclass(frozen=True)
class TransferSpec:
    payer: str
    payee: str
    amount: Decimal
    token: str


class WalletCapability(Protocol):
    def is_available(self, provider_name: str) -> bool: ...

    async def connect(self, provider_name: str) -> WalletConnection: ...

    async def disconnect(self) -> None: ...

    async def list_accounts(self) -> list[str]: ...

    async def sign_and_submit(self, spec: TransferSpec) -> TransactionHandle: ...

    def on_account_change(self, listener: AccountListener) -> None: ...


class SimulatedWallet:
    """Wallet extension stand-in that signs by submitting straight to the ledger.

    Set ``reject_signing`` to model the user pressing "Reject" in the popup.
    """

    def __init__(
        self,
        ledger: LedgerCapability,
        accounts: list[str],
        installed: set[str] | None = None,
        sign_timeout: float = 30.0,
    ) -> None:
        if not accounts:
            raise ValueError("SimulatedWallet needs at least one account")
        self._ledger = ledger
        self._accounts = list(accounts)
        self._installed = installed if installed is not None else {p.value for p in WalletProvider}
        self._sign_timeout = sign_timeout
        self._connection: WalletConnection | None = None
        self._listeners: list[AccountListener] = []
        self.reject_signing = False

    @property
    def connection(self) -> WalletConnection | None:
        return self._connection

    def is_available(self, provider_name: str) -> bool:
        return provider_name.lower() in self._installed

    async def connect(self, provider_name: str) -> WalletConnection:
        name = provider_name.lower()
        if not self.is_available(name):
            raise WalletNotInstalledError(provider_name)
        self._connection = WalletConnection(address=self._accounts[0], provider=name)
        logger.info("Wallet %s connected: %s", name, self._connection.address)
        self._notify(self._connection.address)
        return self._connection

    async def disconnect(self) -> None:
        if self._connection is None:
            return
        logger.info("Wallet %s disconnected", self._connection.provider)
        self._connection = None
        self._notify(None)

    async def list_accounts(self) -> list[str]:
        return list(self._accounts) if self._connection else []

    def switch_account(self, address: str) -> None:
        if address not in self._accounts:
            self._accounts.append(address)
        if self._connection is not None:
            self._connection = WalletConnection(address=address, provider=self._connection.provider)
            self._notify(address)

    def on_account_change(self, listener: AccountListener) -> None:
        """Listener receives the new address, or None on disconnect."""
        self._listeners.append(listener)

    def _notify(self, address: str | None) -> None:
        for listener in list(self._listeners):
            listener(address)

    async def sign_and_submit(self, spec: TransferSpec) -> TransactionHandle:
        if self._connection is None:
            raise ExternalCapabilityError("wallet", "wallet not connected")
        if spec.payer != self._connection.address:
            raise WalletRejectedError(f"cannot sign for {spec.payer}")
        if self.reject_signing:
            raise WalletRejectedError()
        try:
            return await asyncio.wait_for(
                self._ledger.submit_transfer(spec.payer, spec.payee, spec.amount, spec.token),
                timeout=self._sign_timeout,
            )
        except TimeoutError as e:
            raise CapabilityTimeoutError("wallet", self._sign_timeout) from e
