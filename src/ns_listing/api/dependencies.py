"""FastAPI dependencies resolving the instances owned by the composition root."""

from typing import Annotated

from fastapi import Depends, Request

from src.ns_capability.verification import SimulatedKycGate
from src.ns_listing.application.service import ListingApplicationService


def get_listing_service(request: Request) -> ListingApplicationService:
    return request.app.state.listing_service


def get_kyc_gate(request: Request) -> SimulatedKycGate:
    return request.app.state.kyc_gate


ListingServiceDep = Annotated[ListingApplicationService, Depends(get_listing_service)]
KycGateDep = Annotated[SimulatedKycGate, Depends(get_kyc_gate)]
