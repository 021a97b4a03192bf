"""Read-side projections over listing snapshots: marketplace browsing and portfolio.

Visibility always goes through lifecycle.is_purchasable; search, category
filters and sort orders only narrow or reorder that set. Comparisons use
Decimal, never float.
"""

from dataclasses import dataclass
from decimal import Decimal

from src.ns_common.enums import ListingStatus, MarketplaceFilter, SortOrder
from src.ns_listing.domain.lifecycle import is_purchasable
from src.ns_listing.domain.models import Listing
from src.ns_listing.domain.pricing import (
    LOW_RISK_RATIO_PCT,
    PriceSource,
    StaticPriceSource,
    listing_collateral_ratio,
    listing_expected_interest,
    return_on_investment_pct,
)

HIGH_APR_PCT = Decimal("10")
SHORT_TERM_DAYS = 30


def purchasable(listings: list[Listing]) -> list[Listing]:
    return [lst for lst in listings if is_purchasable(lst)]


def _matches_search(listing: Listing, query: str) -> bool:
    q = query.lower()
    return (
        q in listing.loan_token.lower()
        or q in listing.collateral_token.lower()
        or q in listing.token_address.lower()
    )


def _matches_filter(listing: Listing, category: MarketplaceFilter, prices: PriceSource) -> bool:
    if category is MarketplaceFilter.HIGH_APR:
        return listing.apr_decimal > HIGH_APR_PCT
    if category is MarketplaceFilter.LOW_RISK:
        ratio = listing_collateral_ratio(listing, prices)
        return ratio is not None and ratio >= LOW_RISK_RATIO_PCT
    if category is MarketplaceFilter.SHORT_TERM:
        return listing.term_days <= SHORT_TERM_DAYS
    return True


def _sorted(listings: list[Listing], order: SortOrder) -> list[Listing]:
    if order is SortOrder.OLDEST:
        return sorted(listings, key=lambda lst: (lst.created_at, lst.id))
    if order is SortOrder.HIGHEST_APR:
        return sorted(listings, key=lambda lst: (lst.apr_decimal, -lst.id), reverse=True)
    if order is SortOrder.LOWEST_APR:
        return sorted(listings, key=lambda lst: (lst.apr_decimal, lst.id))
    return sorted(listings, key=lambda lst: (lst.created_at, lst.id), reverse=True)


def marketplace_view(
    listings: list[Listing],
    search: str = "",
    category: MarketplaceFilter = MarketplaceFilter.ALL,
    order: SortOrder = SortOrder.NEWEST,
    prices: PriceSource | None = None,
) -> list[Listing]:
    """What a viewer sees on the marketplace page."""
    prices = prices or StaticPriceSource()
    rows = purchasable(listings)
    if search:
        rows = [lst for lst in rows if _matches_search(lst, search)]
    rows = [lst for lst in rows if _matches_filter(lst, category, prices)]
    return _sorted(rows, order)


# ---------------------------------------------------------------------------
# Portfolio
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Investment:
    listing: Listing
    expected_interest: Decimal
    roi_pct: Decimal


@dataclass(frozen=True)
class Portfolio:
    address: str
    created: list[Listing]
    investments: list[Investment]

    @property
    def open_listings(self) -> list[Listing]:
        return [lst for lst in self.created if lst.status == ListingStatus.ACTIVE.value]

    def total_invested(self, token: str) -> Decimal:
        return sum(
            (i.listing.loan_amount_decimal for i in self.investments if i.listing.loan_token == token),
            Decimal(0),
        )

    def total_expected_interest(self, token: str) -> Decimal:
        return sum(
            (i.expected_interest for i in self.investments if i.listing.loan_token == token),
            Decimal(0),
        )


def portfolio(listings: list[Listing], address: str) -> Portfolio:
    """'My loans' (created by address) and 'my investments' (owned by address)."""
    created = sorted((lst for lst in listings if lst.creator == address), key=lambda lst: lst.id)
    investments = []
    for lst in sorted((lst for lst in listings if lst.owner == address), key=lambda lst: lst.id):
        interest = listing_expected_interest(lst)
        investments.append(
            Investment(
                listing=lst,
                expected_interest=interest,
                roi_pct=return_on_investment_pct(lst.loan_amount_decimal, interest),
            )
        )
    return Portfolio(address=address, created=created, investments=investments)
