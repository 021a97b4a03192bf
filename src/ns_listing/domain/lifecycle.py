"""Listing lifecycle rules — pure decision logic, no I/O.

    active ──purchase──> purchased ──admin──> repaid
       │                     └──────admin──> defaulted
       └──cancel (creator)──> cancelled

cancelled, repaid and defaulted are terminal. Nothing returns to active and
nothing is purchased twice. The store applies transitions; these functions
decide whether a transition is legal and raise IllegalTransitionError if not.

Wallet addresses are base58 and therefore compared case-sensitively.
"""

from src.ns_common.enums import ListingStatus
from src.ns_common.errors import (
    IllegalTransitionError,
    ValidationError,
    VerificationRequiredError,
)
from src.ns_listing.domain.models import Listing

_ACTIVE = ListingStatus.ACTIVE.value
_PURCHASED = ListingStatus.PURCHASED.value
_CANCELLED = ListingStatus.CANCELLED.value

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    _ACTIVE: frozenset({_PURCHASED, _CANCELLED}),
    _PURCHASED: frozenset({ListingStatus.REPAID.value, ListingStatus.DEFAULTED.value}),
    _CANCELLED: frozenset(),
    ListingStatus.REPAID.value: frozenset(),
    ListingStatus.DEFAULTED.value: frozenset(),
}

# Targets reachable through PATCH /status; the others need an actor.
ADMIN_TARGETS: frozenset[str] = frozenset(
    {ListingStatus.REPAID.value, ListingStatus.DEFAULTED.value}
)

VALID_STATUSES: frozenset[str] = frozenset(s.value for s in ListingStatus)


def is_purchasable(listing: Listing) -> bool:
    """Single source of truth for marketplace visibility."""
    return listing.status == _ACTIVE and listing.owner is None


def is_self_purchase(actor: str, creator: str) -> bool:
    return actor == creator


def ensure_transition(
    listing_id: int,
    source: str,
    target: str,
    actor: str | None = None,
) -> None:
    if target not in ALLOWED_TRANSITIONS.get(source, frozenset()):
        raise IllegalTransitionError(listing_id, source, target, actor)


def ensure_purchasable(listing: Listing, actor: str) -> None:
    """State half of the purchase precondition; re-checked by the store under its lock."""
    if listing.owner is not None:
        raise IllegalTransitionError(
            listing.id, listing.status, _PURCHASED, actor,
            reason=f"already owned by {listing.owner}",
        )
    ensure_transition(listing.id, listing.status, _PURCHASED, actor)


def check_purchase(listing: Listing, actor: str, verified: bool) -> None:
    """active -> purchased: actor is not the creator, listing unowned, actor verified."""
    if is_self_purchase(actor, listing.creator):
        raise IllegalTransitionError(
            listing.id, listing.status, _PURCHASED, actor,
            reason="creator cannot purchase own listing; cancel it instead",
        )
    ensure_purchasable(listing, actor)
    if not verified:
        raise VerificationRequiredError(listing.id, listing.status, _PURCHASED, actor)


def check_create(actor: str, verified: bool) -> None:
    if not verified:
        raise VerificationRequiredError(None, "none", _ACTIVE, actor)


def check_cancel(listing: Listing, actor: str) -> None:
    """active -> cancelled: only the creator, only while nobody owns it."""
    if not is_self_purchase(actor, listing.creator):
        raise IllegalTransitionError(
            listing.id, listing.status, _CANCELLED, actor,
            reason="only the creator may cancel a listing",
        )
    if listing.owner is not None:
        raise IllegalTransitionError(
            listing.id, listing.status, _CANCELLED, actor,
            reason=f"already owned by {listing.owner}",
        )
    ensure_transition(listing.id, listing.status, _CANCELLED, actor)


def check_status_change(listing: Listing, target: str) -> bool:
    """Administrative status set. Returns False when target equals the current status."""
    if target not in VALID_STATUSES:
        raise ValidationError([{"field": "status", "message": f"unknown status '{target}'"}])
    if target == listing.status:
        return False
    if target not in ADMIN_TARGETS:
        raise IllegalTransitionError(
            listing.id, listing.status, target,
            reason="use the purchase or cancel operation",
        )
    ensure_transition(listing.id, listing.status, target)
    return True
