"""Loan economics: collateralization ratio and simple interest.

Prices come from a pluggable PriceSource quoted in USD. StaticPriceSource
carries the demo's fixed token prices; a live feed implements the same
Protocol. All arithmetic is Decimal.
"""

from decimal import Decimal, localcontext
from typing import Protocol, runtime_checkable

from src.ns_common.decimals import DAYS_PER_YEAR, HUNDRED, quantize, working_precision
from src.ns_common.enums import TokenSymbol
from src.ns_listing.domain.models import Listing

DEMO_PRICES_USD: dict[str, Decimal] = {
    TokenSymbol.SOL.value: Decimal("50"),
    TokenSymbol.USDC.value: Decimal("1"),
    TokenSymbol.USDT.value: Decimal("1"),
    TokenSymbol.BTC.value: Decimal("30000"),
    TokenSymbol.ETH.value: Decimal("2000"),
}

# Collateral at or above this percentage of the loan value counts as low risk.
LOW_RISK_RATIO_PCT = Decimal("150")


@runtime_checkable
class PriceSource(Protocol):
    def get_price(self, symbol: str) -> Decimal | None: ...


class StaticPriceSource:
    """Time-independent USD prices."""

    def __init__(self, prices: dict[str, Decimal] | None = None) -> None:
        self._prices = dict(DEMO_PRICES_USD if prices is None else prices)

    def get_price(self, symbol: str) -> Decimal | None:
        return self._prices.get(symbol.upper())

    def update_price(self, symbol: str, price: Decimal) -> None:
        self._prices[symbol.upper()] = price

    def __repr__(self) -> str:
        return f"StaticPriceSource({len(self._prices)} prices)"


def collateralization_ratio(
    loan_token: str,
    loan_amount: Decimal,
    collateral_token: str,
    collateral_amount: Decimal,
    prices: PriceSource,
) -> Decimal | None:
    """Collateral value as a percentage of loan value, rounded to 2 places.

    None when either token has no price or the loan value is zero.
    5000 USDC against 100 SOL at SOL=50 -> 100.00.
    """
    loan_price = prices.get_price(loan_token)
    collateral_price = prices.get_price(collateral_token)
    if loan_price is None or collateral_price is None:
        return None
    with localcontext() as ctx:
        ctx.prec = working_precision(
            loan_amount, loan_price, collateral_amount, collateral_price, HUNDRED, places=2
        )
        loan_value = loan_amount * loan_price
        if loan_value <= 0:
            return None
        return quantize(collateral_amount * collateral_price / loan_value * HUNDRED)


def listing_collateral_ratio(listing: Listing, prices: PriceSource) -> Decimal | None:
    return collateralization_ratio(
        listing.loan_token,
        listing.loan_amount_decimal,
        listing.collateral_token,
        listing.collateral_amount_decimal,
        prices,
    )


def expected_interest(principal: Decimal, apr_pct: Decimal, term_days: int) -> Decimal:
    """Simple interest over the term: principal * apr/100 * days/365, 6 places."""
    days = Decimal(term_days)
    with localcontext() as ctx:
        ctx.prec = working_precision(principal, apr_pct, HUNDRED, days, DAYS_PER_YEAR)
        return quantize(principal * apr_pct / HUNDRED * days / DAYS_PER_YEAR, 6)


def listing_expected_interest(listing: Listing) -> Decimal:
    return expected_interest(listing.loan_amount_decimal, listing.apr_decimal, listing.term_days)


def return_on_investment_pct(principal: Decimal, interest: Decimal) -> Decimal:
    if principal <= 0:
        return Decimal(0)
    with localcontext() as ctx:
        ctx.prec = working_precision(interest, principal, HUNDRED, places=2)
        return quantize(interest / principal * HUNDRED)
