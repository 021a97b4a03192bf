"""User actions: create, purchase and cancel listings from a wallet session.

Each action runs the same order of steps:

  1. verification gate (KYC)
  2. lifecycle precheck against a fresh copy of the listing
  3. capability call (mint the loan token / sign and submit the transfer)
  4. store call over HTTP with the capability result
  5. invalidate the actor's open views

A failure in step 3 raises ExternalCapabilityError before the store is
touched, so the listing stays exactly as it was. A rejection in step 4
(someone else bought it first) still invalidates the views so they drop the
listing, then re-raises.
"""

import logging

from src.ns_capability.ledger import LedgerCapability
from src.ns_capability.verification import VerificationCapability
from src.ns_capability.wallet import TransferSpec, WalletCapability
from src.ns_common.decimals import parse_decimal
from src.ns_common.errors import ExternalCapabilityError, IllegalTransitionError
from src.ns_listing.application.schemas import CreateListingRequest
from src.ns_listing.domain import lifecycle
from src.ns_listing.domain.models import Listing, LoanTerms
from src.ns_marketplace.client import ListingApiClient
from src.ns_marketplace.events import InvalidationBus

logger = logging.getLogger(__name__)


class MarketplaceActions:
    def __init__(
        self,
        api: ListingApiClient,
        wallet: WalletCapability,
        ledger: LedgerCapability,
        verification: VerificationCapability,
        bus: InvalidationBus,
    ) -> None:
        self._api = api
        self._wallet = wallet
        self._ledger = ledger
        self._verification = verification
        self._bus = bus

    async def verify_identity(self, actor: str) -> bool:
        return await self._verification.verify(actor)

    async def _is_verified(self, actor: str, auto_verify: bool) -> bool:
        if await self._verification.is_verified(actor):
            return True
        if auto_verify:
            return await self.verify_identity(actor)
        return False

    async def create_listing(
        self, creator: str, terms: LoanTerms, auto_verify: bool = False
    ) -> Listing:
        """Mint a loan token for ``terms`` and list it on the marketplace."""
        lifecycle.check_create(creator, await self._is_verified(creator, auto_verify))

        # Shape-check the terms before minting; the real token address is filled in after.
        req = CreateListingRequest(
            loan_token=terms.loan_token,
            loan_amount=terms.loan_amount,
            collateral_token=terms.collateral_token,
            collateral_amount=terms.collateral_amount,
            apr=terms.apr,
            term_days=terms.term_days,
            creator=creator,
            token_address="pending",
        )
        token_address = await self._ledger.create_token(creator, terms)
        listing = await self._api.create_listing(req.model_copy(update={"token_address": token_address}))
        logger.info("Listing %d created by %s (token %s)", listing.id, creator, token_address)
        self._bus.publish("create")
        return listing

    async def purchase(self, listing_id: int, buyer: str, auto_verify: bool = False) -> Listing:
        """Pay the creator the loan amount and take ownership of the listing."""
        verified = await self._is_verified(buyer, auto_verify)
        listing = await self._api.get_listing(listing_id)
        lifecycle.check_purchase(listing, buyer, verified)

        spec = TransferSpec(
            payer=buyer,
            payee=listing.creator,
            amount=parse_decimal(listing.loan_amount),
            token=listing.loan_token,
        )
        try:
            handle = await self._wallet.sign_and_submit(spec)
        except ExternalCapabilityError as e:
            logger.warning("Purchase of listing %d by %s aborted: %s", listing_id, buyer, e.message)
            raise

        try:
            updated = await self._api.purchase(listing_id, buyer, handle.signature)
        except IllegalTransitionError:
            logger.warning(
                "Listing %d was taken before %s's purchase (tx %s)",
                listing_id, buyer, handle.signature,
            )
            self._bus.publish("purchase-conflict")
            raise
        logger.info("Listing %d purchased by %s (tx %s)", listing_id, buyer, handle.signature)
        self._bus.publish("purchase")
        return updated

    async def cancel(self, listing_id: int, actor: str) -> Listing:
        listing = await self._api.get_listing(listing_id)
        lifecycle.check_cancel(listing, actor)
        updated = await self._api.cancel(listing_id, actor)
        self._bus.publish("cancel")
        return updated
