"""Field validation for listing creation. Collects every problem before raising."""

from src.ns_common.decimals import is_decimal_string
from src.ns_common.enums import ListingStatus
from src.ns_common.errors import ValidationError
from src.ns_listing.domain.models import ListingDraft

_DECIMAL_FIELDS = (
    ("loan_amount", "loanAmount"),
    ("collateral_amount", "collateralAmount"),
    ("apr", "apr"),
)
_TEXT_FIELDS = (
    ("loan_token", "loanToken"),
    ("collateral_token", "collateralToken"),
    ("creator", "creator"),
    ("token_address", "tokenAddress"),
)


def _error(field: str, message: str) -> dict[str, str]:
    return {"field": field, "message": message}


def validate_draft(draft: ListingDraft) -> None:
    errors: list[dict[str, str]] = []

    for attr, wire in _TEXT_FIELDS:
        value = getattr(draft, attr)
        if not isinstance(value, str) or not value.strip():
            errors.append(_error(wire, "is required"))

    for attr, wire in _DECIMAL_FIELDS:
        value = getattr(draft, attr)
        if not isinstance(value, str) or not value.strip():
            errors.append(_error(wire, "is required"))
        elif not is_decimal_string(value.strip()):
            errors.append(_error(wire, "must be a valid number"))

    term = draft.term_days
    if isinstance(term, bool) or not isinstance(term, int):
        errors.append(_error("termDays", "must be a whole number"))
    elif term <= 0:
        errors.append(_error("termDays", "must be positive"))

    # A new listing is unowned, so only the initial state is acceptable.
    if draft.status is not None and draft.status != ListingStatus.ACTIVE.value:
        errors.append(_error("status", "new listings must start active"))

    if errors:
        raise ValidationError(errors)
