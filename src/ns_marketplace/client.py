"""HTTP client for the listing API, used by views and user actions.

Error envelopes are turned back into the same AppError subclasses the server
raised, so callers handle IllegalTransitionError / ListingNotFoundError
identically on both sides of the wire. Transport failures surface as
ExternalCapabilityError.
"""

import logging
from typing import Any

import httpx

from src.ns_common.errors import (
    AppError,
    ExternalCapabilityError,
    IllegalTransitionError,
    ListingNotFoundError,
    ValidationError,
    VerificationRequiredError,
)
from src.ns_listing.application.schemas import CreateListingRequest, ListingResponse
from src.ns_listing.domain.models import Listing

logger = logging.getLogger(__name__)


def _error_from_envelope(resp: httpx.Response, listing_id: int | None) -> AppError:
    try:
        body: dict[str, Any] = resp.json()
    except ValueError:
        body = {}
    code = body.get("code", 9002)
    message = body.get("message", resp.text or resp.reason_phrase)
    data = body.get("data") or {}

    if code == 1001:
        return ValidationError(data.get("errors", []))
    if code == 1002 and listing_id is not None:
        return ListingNotFoundError(listing_id)
    if code == 2002:
        return VerificationRequiredError(
            data.get("listingId"), data.get("from", "?"), data.get("to", "?"), data.get("actor", "")
        )
    if code == 2001:
        err = IllegalTransitionError(
            data.get("listingId"), data.get("from", "?"), data.get("to", "?"), data.get("actor")
        )
        err.message = message
        return err
    return AppError(code, message, resp.status_code, data or None)


class ListingApiClient:
    def __init__(self, http: httpx.AsyncClient, prefix: str = "/api") -> None:
        self._http = http
        self._prefix = prefix.rstrip("/")

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        listing_id: int | None = None,
    ) -> Any:
        try:
            resp = await self._http.request(method, f"{self._prefix}{path}", json=json)
        except httpx.HTTPError as e:
            raise ExternalCapabilityError("listing-api", f"{method} {path}: {e}") from e
        if resp.is_error:
            raise _error_from_envelope(resp, listing_id)
        return resp.json()

    async def _listings(self, path: str) -> list[Listing]:
        rows = await self._request("GET", path)
        return [ListingResponse.model_validate(row).to_domain() for row in rows]

    async def _listing(
        self, method: str, path: str, listing_id: int, json: dict[str, Any] | None = None
    ) -> Listing:
        row = await self._request(method, path, json=json, listing_id=listing_id)
        return ListingResponse.model_validate(row).to_domain()

    async def get_listings(self) -> list[Listing]:
        return await self._listings("/listings")

    async def get_listing(self, listing_id: int) -> Listing:
        return await self._listing("GET", f"/listings/{listing_id}", listing_id)

    async def get_by_creator(self, address: str) -> list[Listing]:
        return await self._listings(f"/listings/creator/{address}")

    async def get_by_owner(self, address: str) -> list[Listing]:
        return await self._listings(f"/listings/owner/{address}")

    async def create_listing(self, req: CreateListingRequest) -> Listing:
        row = await self._request(
            "POST", "/listings", json=req.model_dump(by_alias=True, exclude_none=True)
        )
        return ListingResponse.model_validate(row).to_domain()

    async def purchase(self, listing_id: int, owner_address: str, transaction_hash: str) -> Listing:
        return await self._listing(
            "POST", f"/listings/{listing_id}/purchase", listing_id,
            json={"ownerAddress": owner_address, "transactionHash": transaction_hash},
        )

    async def cancel(self, listing_id: int, actor_address: str) -> Listing:
        return await self._listing(
            "POST", f"/listings/{listing_id}/cancel", listing_id,
            json={"actorAddress": actor_address},
        )

    async def set_status(self, listing_id: int, status: str) -> Listing:
        return await self._listing(
            "PATCH", f"/listings/{listing_id}/status", listing_id, json={"status": status}
        )

    async def dev_reset(self, wallet_address: str) -> list[Listing]:
        rows = await self._request("POST", "/dev/reset", json={"walletAddress": wallet_address})
        return [ListingResponse.model_validate(row).to_domain() for row in rows]
