"""ns_listing REST endpoints.

GET   /listings                     — every listing, by id
GET   /listings/marketplace         — purchasable projection, newest first
GET   /listings/creator/{address}   — listings created by a wallet
GET   /listings/owner/{address}     — listings bought by a wallet
GET   /listings/{listing_id}        — single listing
POST  /listings                     — create (201)
PATCH /listings/{listing_id}/status — administrative status change
POST  /listings/{listing_id}/purchase
POST  /listings/{listing_id}/cancel — creator withdraws an unsold listing
"""

from fastapi import APIRouter

from src.ns_listing.api.dependencies import ListingServiceDep
from src.ns_listing.application.schemas import (
    CancelRequest,
    CreateListingRequest,
    ListingResponse,
    PurchaseRequest,
    SetStatusRequest,
)

router = APIRouter(prefix="/listings", tags=["listings"])


@router.get("", response_model=list[ListingResponse])
async def list_listings(service: ListingServiceDep) -> list[ListingResponse]:
    return service.list_listings()


@router.get("/marketplace", response_model=list[ListingResponse])
async def list_marketplace(service: ListingServiceDep) -> list[ListingResponse]:
    return service.list_marketplace()


@router.get("/creator/{address}", response_model=list[ListingResponse])
async def list_by_creator(address: str, service: ListingServiceDep) -> list[ListingResponse]:
    return service.list_by_creator(address)


@router.get("/owner/{address}", response_model=list[ListingResponse])
async def list_by_owner(address: str, service: ListingServiceDep) -> list[ListingResponse]:
    return service.list_by_owner(address)


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(listing_id: int, service: ListingServiceDep) -> ListingResponse:
    return service.get_listing(listing_id)


@router.post("", response_model=ListingResponse, status_code=201)
async def create_listing(
    req: CreateListingRequest, service: ListingServiceDep
) -> ListingResponse:
    return await service.create_listing(req)


@router.patch("/{listing_id}/status", response_model=ListingResponse)
async def set_status(
    listing_id: int, req: SetStatusRequest, service: ListingServiceDep
) -> ListingResponse:
    return service.set_status(listing_id, req.status)


@router.post("/{listing_id}/purchase", response_model=ListingResponse)
async def purchase_listing(
    listing_id: int, req: PurchaseRequest, service: ListingServiceDep
) -> ListingResponse:
    return await service.purchase(listing_id, req.owner_address, req.transaction_hash)


@router.post("/{listing_id}/cancel", response_model=ListingResponse)
async def cancel_listing(
    listing_id: int, req: CancelRequest, service: ListingServiceDep
) -> ListingResponse:
    return service.cancel(listing_id, req.actor_address)
