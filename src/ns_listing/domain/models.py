"""Domain models for ns_listing — pure dataclasses, no framework dependency.

Listings are immutable snapshots: every state change produces a new record
via dataclasses.replace(), so a reader holding a Listing never observes a
half-applied transition.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class ListingDraft:
    """Creation input after shape validation; amounts are decimal strings."""

    loan_token: str
    loan_amount: str
    collateral_token: str
    collateral_amount: str
    apr: str
    term_days: int
    creator: str
    token_address: str
    status: str | None = None


@dataclass(frozen=True)
class Listing:
    id: int
    loan_token: str
    loan_amount: str
    collateral_token: str
    collateral_amount: str
    apr: str
    term_days: int
    creator: str
    token_address: str
    status: str
    created_at: datetime
    owner: str | None = None
    transaction_hash: str | None = None
    purchased_at: datetime | None = None

    @property
    def loan_amount_decimal(self) -> Decimal:
        return Decimal(self.loan_amount)

    @property
    def collateral_amount_decimal(self) -> Decimal:
        return Decimal(self.collateral_amount)

    @property
    def apr_decimal(self) -> Decimal:
        return Decimal(self.apr)


@dataclass(frozen=True)
class LoanTerms:
    """Terms handed to the ledger when minting a listing's loan token."""

    loan_token: str
    loan_amount: str
    collateral_token: str
    collateral_amount: str
    apr: str
    term_days: int
