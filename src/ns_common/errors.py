"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Listing data (validation, lookup)
  2xxx: Listing lifecycle (illegal transitions, verification gate)
  3xxx: External capabilities (wallet, ledger, verification)
  9xxx: System
"""

from typing import Any


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        data: Any = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.data = data
        super().__init__(message)


# --- 1xxx: Listing data ---

class ValidationError(AppError):
    """Malformed or missing creation/update input. ``errors`` is field-level detail."""

    def __init__(self, errors: list[dict[str, str]]) -> None:
        self.errors = errors
        fields = ", ".join(e["field"] for e in errors)
        super().__init__(1001, f"Invalid listing data: {fields}", 400, {"errors": errors})


class NotFoundError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(1002, message, 404)


class ListingNotFoundError(NotFoundError):
    def __init__(self, listing_id: int) -> None:
        self.listing_id = listing_id
        super().__init__(f"Listing not found: {listing_id}")


# --- 2xxx: Lifecycle ---

class IllegalTransitionError(AppError):
    """A lifecycle precondition failed; the caller's view of the listing is stale or wrong."""

    def __init__(
        self,
        listing_id: int | None,
        source: str,
        target: str,
        actor: str | None = None,
        reason: str = "transition not allowed",
        code: int = 2001,
    ) -> None:
        self.listing_id = listing_id
        self.source = source
        self.target = target
        self.actor = actor
        self.reason = reason
        subject = "New listing" if listing_id is None else f"Listing {listing_id}"
        detail = f"{subject}: cannot move {source} -> {target}: {reason}"
        if actor is not None:
            detail += f" (actor {actor})"
        super().__init__(
            code,
            detail,
            400,
            {"listingId": listing_id, "from": source, "to": target, "actor": actor},
        )


class VerificationRequiredError(IllegalTransitionError):
    def __init__(self, listing_id: int | None, source: str, target: str, actor: str) -> None:
        super().__init__(
            listing_id, source, target, actor,
            reason="identity verification required",
            code=2002,
        )


# --- 3xxx: External capabilities ---

class ExternalCapabilityError(AppError):
    """Wallet / ledger / verification call failed. Never accompanied by a store mutation."""

    def __init__(
        self,
        capability: str,
        detail: str,
        code: int = 3001,
        http_status: int = 502,
    ) -> None:
        self.capability = capability
        self.detail = detail
        super().__init__(code, f"{capability} error: {detail}", http_status)


class WalletNotInstalledError(ExternalCapabilityError):
    def __init__(self, provider_name: str) -> None:
        super().__init__("wallet", f"{provider_name} wallet is not installed", 3002)


class WalletRejectedError(ExternalCapabilityError):
    def __init__(self, detail: str = "User rejected the request") -> None:
        super().__init__("wallet", detail, 3003)


class CapabilityTimeoutError(ExternalCapabilityError):
    def __init__(self, capability: str, timeout: float) -> None:
        super().__init__(capability, f"timed out after {timeout}s", 3004, 504)


# --- 9xxx: System ---

class StoreError(AppError):
    """Backing store unavailable or failed mid-operation.

    Raised by ListingStoreProtocol implementations backed by durable storage;
    the in-memory store never raises it. Rendered as a 500 envelope.
    """

    def __init__(self, detail: str = "Listing store failure") -> None:
        super().__init__(9001, detail, 500)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
