"""InMemoryListingStore — concrete implementation of ListingStoreProtocol.

State lives in a dict keyed by listing id. Every mutation runs under one
lock and swaps in a new immutable Listing, so concurrent readers only ever
see committed records. Volatile: contents are lost when the process exits.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from src.ns_common.datetime_utils import utc_now
from src.ns_common.enums import ListingStatus
from src.ns_common.errors import IllegalTransitionError
from src.ns_listing.domain.lifecycle import check_purchase
from src.ns_listing.domain.models import Listing, ListingDraft
from src.ns_listing.domain.validation import validate_draft

logger = logging.getLogger(__name__)

_FIRST_ID = 1


class InMemoryListingStore:
    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._listings: dict[int, Listing] = {}
        self._next_id = _FIRST_ID
        self._clock = clock
        self._lock = threading.Lock()

    def create(self, draft: ListingDraft) -> Listing:
        validate_draft(draft)
        with self._lock:
            listing_id = self._next_id
            self._next_id += 1
            listing = Listing(
                id=listing_id,
                loan_token=draft.loan_token.strip(),
                loan_amount=draft.loan_amount.strip(),
                collateral_token=draft.collateral_token.strip(),
                collateral_amount=draft.collateral_amount.strip(),
                apr=draft.apr.strip(),
                term_days=draft.term_days,
                creator=draft.creator.strip(),
                token_address=draft.token_address.strip(),
                status=draft.status or ListingStatus.ACTIVE.value,
                created_at=self._clock(),
            )
            self._listings[listing_id] = listing
        logger.info("Listing %d created by %s", listing_id, listing.creator)
        return listing

    def get_by_id(self, listing_id: int) -> Listing | None:
        return self._listings.get(listing_id)

    def get_all(self) -> list[Listing]:
        with self._lock:
            return list(self._listings.values())

    def get_by_creator(self, address: str) -> list[Listing]:
        return [lst for lst in self.get_all() if lst.creator == address]

    def get_by_owner(self, address: str) -> list[Listing]:
        return [lst for lst in self.get_all() if lst.owner == address]

    def set_status(
        self,
        listing_id: int,
        status: str,
        expected_status: str | None = None,
    ) -> Listing | None:
        """Overwrite status. With ``expected_status`` the write is a compare-and-set."""
        with self._lock:
            current = self._listings.get(listing_id)
            if current is None:
                return None
            if expected_status is not None and current.status != expected_status:
                raise IllegalTransitionError(
                    listing_id, current.status, status,
                    reason=f"listing changed concurrently (expected {expected_status})",
                )
            if current.status == status:
                return current
            updated = replace(current, status=status)
            self._listings[listing_id] = updated
        logger.info("Listing %d status %s -> %s", listing_id, current.status, status)
        return updated

    def record_purchase(
        self,
        listing_id: int,
        owner_address: str,
        transaction_hash: str,
    ) -> Listing | None:
        """Set owner, transaction hash, purchase time and status in one step.

        Raises IllegalTransitionError if the listing is no longer purchasable
        or the buyer is its creator; the first purchase to reach the lock wins.
        """
        with self._lock:
            current = self._listings.get(listing_id)
            if current is None:
                return None
            check_purchase(current, owner_address, verified=True)
            updated = replace(
                current,
                owner=owner_address,
                transaction_hash=transaction_hash,
                purchased_at=self._clock(),
                status=ListingStatus.PURCHASED.value,
            )
            self._listings[listing_id] = updated
        logger.info(
            "Listing %d purchased by %s (tx %s)", listing_id, owner_address, transaction_hash
        )
        return updated

    def reset(self) -> None:
        with self._lock:
            count = len(self._listings)
            self._listings.clear()
            self._next_id = _FIRST_ID
        logger.info("Listing store reset (%d listings cleared)", count)
