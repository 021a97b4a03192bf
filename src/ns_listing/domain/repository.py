# src/ns_listing/domain/repository.py
"""Listing store Protocol — dependency inversion for testability.

The store is synchronous: every operation is short, in-memory and applied
atomically. A durable backend must keep the same contract, in particular
the first-writer-wins check inside record_purchase, and report backend
failures as StoreError.
"""

from typing import Protocol

from src.ns_listing.domain.models import Listing, ListingDraft


class ListingStoreProtocol(Protocol):
    def create(self, draft: ListingDraft) -> Listing: ...

    def get_by_id(self, listing_id: int) -> Listing | None: ...

    def get_all(self) -> list[Listing]: ...

    def get_by_creator(self, address: str) -> list[Listing]: ...

    def get_by_owner(self, address: str) -> list[Listing]: ...

    def set_status(
        self,
        listing_id: int,
        status: str,
        expected_status: str | None = None,
    ) -> Listing | None: ...

    def record_purchase(
        self,
        listing_id: int,
        owner_address: str,
        transaction_hash: str,
    ) -> Listing | None: ...

    def reset(self) -> None: ...
