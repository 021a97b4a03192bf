"""ListingApplicationService — composition of store, lifecycle rules and pricing.

The service owns no state: the store instance is injected by the composition
root (or a test). Every lifecycle check happens here before the store is
touched; the store repeats the purchase check under its lock so the first of
two racing buyers wins.
"""

import logging

from src.ns_capability.verification import VerificationCapability
from src.ns_common.enums import ListingStatus
from src.ns_common.errors import ListingNotFoundError
from src.ns_listing.application.schemas import CreateListingRequest, ListingResponse
from src.ns_listing.application.seed import (
    DEV_RESET_PURCHASE_TX,
    EXAMPLE_LISTINGS,
    dev_reset_drafts,
)
from src.ns_listing.domain import lifecycle
from src.ns_listing.domain.models import Listing
from src.ns_listing.domain.pricing import PriceSource, StaticPriceSource
from src.ns_listing.domain.repository import ListingStoreProtocol

logger = logging.getLogger(__name__)


def _by_id(listings: list[Listing]) -> list[Listing]:
    return sorted(listings, key=lambda lst: lst.id)


class ListingApplicationService:
    def __init__(
        self,
        store: ListingStoreProtocol,
        prices: PriceSource | None = None,
        verification: VerificationCapability | None = None,
    ) -> None:
        self._store = store
        self._prices: PriceSource = prices or StaticPriceSource()
        # None: the verification gate is enforced client-side only
        self._verification = verification

    @property
    def store(self) -> ListingStoreProtocol:
        return self._store

    def to_response(self, listing: Listing) -> ListingResponse:
        return ListingResponse.from_domain(listing, self._prices)

    def _responses(self, listings: list[Listing]) -> list[ListingResponse]:
        return [self.to_response(lst) for lst in listings]

    async def _is_verified(self, actor: str) -> bool:
        if self._verification is None:
            return True
        return await self._verification.is_verified(actor)

    def _require(self, listing_id: int) -> Listing:
        listing = self._store.get_by_id(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return listing

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_listings(self) -> list[ListingResponse]:
        return self._responses(_by_id(self._store.get_all()))

    def list_marketplace(self) -> list[ListingResponse]:
        """Purchasable projection, newest first."""
        open_listings = [lst for lst in self._store.get_all() if lifecycle.is_purchasable(lst)]
        open_listings.sort(key=lambda lst: (lst.created_at, lst.id), reverse=True)
        return self._responses(open_listings)

    def get_listing(self, listing_id: int) -> ListingResponse:
        return self.to_response(self._require(listing_id))

    def list_by_creator(self, address: str) -> list[ListingResponse]:
        return self._responses(_by_id(self._store.get_by_creator(address)))

    def list_by_owner(self, address: str) -> list[ListingResponse]:
        return self._responses(_by_id(self._store.get_by_owner(address)))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_listing(self, req: CreateListingRequest) -> ListingResponse:
        lifecycle.check_create(req.creator, await self._is_verified(req.creator))
        listing = self._store.create(req.to_draft())
        return self.to_response(listing)

    async def purchase(
        self, listing_id: int, owner_address: str, transaction_hash: str
    ) -> ListingResponse:
        verified = await self._is_verified(owner_address)
        listing = self._require(listing_id)
        lifecycle.check_purchase(listing, owner_address, verified)
        updated = self._store.record_purchase(listing_id, owner_address, transaction_hash)
        if updated is None:
            raise ListingNotFoundError(listing_id)
        return self.to_response(updated)

    def cancel(self, listing_id: int, actor_address: str) -> ListingResponse:
        listing = self._require(listing_id)
        lifecycle.check_cancel(listing, actor_address)
        updated = self._store.set_status(
            listing_id, ListingStatus.CANCELLED.value, expected_status=listing.status
        )
        if updated is None:
            raise ListingNotFoundError(listing_id)
        logger.info("Listing %d cancelled by creator %s", listing_id, actor_address)
        return self.to_response(updated)

    def set_status(self, listing_id: int, status: str) -> ListingResponse:
        listing = self._require(listing_id)
        if not lifecycle.check_status_change(listing, status):
            return self.to_response(listing)
        updated = self._store.set_status(listing_id, status, expected_status=listing.status)
        if updated is None:
            raise ListingNotFoundError(listing_id)
        return self.to_response(updated)

    # ------------------------------------------------------------------
    # Demo data
    # ------------------------------------------------------------------

    def seed_examples(self) -> list[ListingResponse]:
        for draft in EXAMPLE_LISTINGS:
            self._store.create(draft)
        return self.list_listings()

    def dev_reset(self, wallet_address: str) -> list[ListingResponse]:
        """Clear the store and load the demo scenario for ``wallet_address``."""
        open_drafts, purchased_draft = dev_reset_drafts(wallet_address)
        self._store.reset()
        for draft in open_drafts:
            self._store.create(draft)
        bought = self._store.create(purchased_draft)
        self._store.record_purchase(bought.id, wallet_address, DEV_RESET_PURCHASE_TX)
        logger.info("Demo data reset for %s", wallet_address)
        return self.list_listings()
