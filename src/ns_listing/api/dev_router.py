"""Demo affordances: store reset and simulated KYC.

POST /dev/reset             — clear the store and load the demo scenario
GET  /kyc/{address}         — verification flag for a wallet
POST /kyc/{address}/verify  — simulated verification (always succeeds after a delay)
"""

from fastapi import APIRouter

from src.ns_listing.api.dependencies import KycGateDep, ListingServiceDep
from src.ns_listing.application.schemas import (
    KycStatusResponse,
    ListingResponse,
    ResetRequest,
)

dev_router = APIRouter(prefix="/dev", tags=["dev"])
kyc_router = APIRouter(prefix="/kyc", tags=["kyc"])


@dev_router.post("/reset", response_model=list[ListingResponse])
async def reset_demo_data(req: ResetRequest, service: ListingServiceDep) -> list[ListingResponse]:
    return service.dev_reset(req.wallet_address)


@kyc_router.get("/{address}", response_model=KycStatusResponse)
async def get_kyc_status(address: str, gate: KycGateDep) -> KycStatusResponse:
    return KycStatusResponse(address=address, verified=await gate.is_verified(address))


@kyc_router.post("/{address}/verify", response_model=KycStatusResponse)
async def verify_identity(address: str, gate: KycGateDep) -> KycStatusResponse:
    return KycStatusResponse(address=address, verified=await gate.verify(address))
