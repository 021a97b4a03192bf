"""Pydantic schemas for ns_listing API requests and responses.

Wire format is camelCase (loanToken, termDays, ...). Amounts and APR are
decimal strings on the way in and out; integers are accepted on input and
normalized to strings, floats are normalized via their shortest repr.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.ns_common.decimals import format_decimal, to_decimal_string
from src.ns_listing.domain.models import Listing, ListingDraft
from src.ns_listing.domain.pricing import (
    PriceSource,
    listing_collateral_ratio,
    listing_expected_interest,
)

DecimalString = Annotated[str, BeforeValidator(to_decimal_string)]
NonEmptyStr = Annotated[str, Field(min_length=1)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateListingRequest(CamelModel):
    loan_token: NonEmptyStr
    loan_amount: DecimalString
    collateral_token: NonEmptyStr
    collateral_amount: DecimalString
    apr: DecimalString
    term_days: int = Field(gt=0)
    creator: NonEmptyStr
    token_address: NonEmptyStr
    status: str | None = None

    def to_draft(self) -> ListingDraft:
        return ListingDraft(
            loan_token=self.loan_token,
            loan_amount=self.loan_amount,
            collateral_token=self.collateral_token,
            collateral_amount=self.collateral_amount,
            apr=self.apr,
            term_days=self.term_days,
            creator=self.creator,
            token_address=self.token_address,
            status=self.status,
        )


class SetStatusRequest(CamelModel):
    status: NonEmptyStr


class PurchaseRequest(CamelModel):
    owner_address: NonEmptyStr
    transaction_hash: NonEmptyStr


class CancelRequest(CamelModel):
    actor_address: NonEmptyStr


class ResetRequest(CamelModel):
    wallet_address: NonEmptyStr


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ListingResponse(CamelModel):
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
    owner: str | None
    transaction_hash: str | None
    created_at: datetime
    purchased_at: datetime | None
    # Derived, never stored
    collateralization_ratio: str | None = None
    expected_interest: str | None = None

    @classmethod
    def from_domain(cls, listing: Listing, prices: PriceSource) -> "ListingResponse":
        ratio = listing_collateral_ratio(listing, prices)
        return cls(
            id=listing.id,
            loan_token=listing.loan_token,
            loan_amount=listing.loan_amount,
            collateral_token=listing.collateral_token,
            collateral_amount=listing.collateral_amount,
            apr=listing.apr,
            term_days=listing.term_days,
            creator=listing.creator,
            token_address=listing.token_address,
            status=listing.status,
            owner=listing.owner,
            transaction_hash=listing.transaction_hash,
            created_at=listing.created_at,
            purchased_at=listing.purchased_at,
            collateralization_ratio=format_decimal(ratio) if ratio is not None else None,
            expected_interest=format_decimal(listing_expected_interest(listing), 6),
        )

    def to_domain(self) -> Listing:
        return Listing(
            id=self.id,
            loan_token=self.loan_token,
            loan_amount=self.loan_amount,
            collateral_token=self.collateral_token,
            collateral_amount=self.collateral_amount,
            apr=self.apr,
            term_days=self.term_days,
            creator=self.creator,
            token_address=self.token_address,
            status=self.status,
            created_at=self.created_at,
            owner=self.owner,
            transaction_hash=self.transaction_hash,
            purchased_at=self.purchased_at,
        )


class KycStatusResponse(CamelModel):
    address: str
    verified: bool
