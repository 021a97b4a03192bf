"""Demo marketplace data.

EXAMPLE_LISTINGS populate a fresh store at startup. dev_reset_drafts() builds
the POST /dev/reset scenario around the caller's wallet: one listing of their
own, two from other users, and one from another user that the caller has
already bought (DEV_RESET_PURCHASE).
"""

from src.ns_listing.domain.models import ListingDraft

EXAMPLE_LISTINGS: tuple[ListingDraft, ...] = (
    ListingDraft(
        loan_token="USDC", loan_amount="5000",
        collateral_token="SOL", collateral_amount="100",
        apr="8.5", term_days=30,
        creator="5YNmS1R9nNSCDzb5a7mMJ1dwK9uHeAAF4CerVckCBAnj",
        token_address="CT5zKYSQHNmP6TXc5n1nqP9V1CZL15gyY6DoBP3qKhry",
    ),
    ListingDraft(
        loan_token="USDT", loan_amount="10000",
        collateral_token="BTC", collateral_amount="0.25",
        apr="12.0", term_days=60,
        creator="9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin",
        token_address="FcVprKm3RChe8jDEhjnzWYRcGdUxGMgfaC1YZgPXLGfx",
    ),
    ListingDraft(
        loan_token="SOL", loan_amount="1000",
        collateral_token="ETH", collateral_amount="15",
        apr="9.75", term_days=45,
        creator="2KW2XRd9kwqet15Aha2oK3tYvd3nWbTFH1MBiRAv1BE1",
        token_address="G15NVgQS9NUo8exjr7JTjA2zy3ajL4DgYJNnEVzfbZ5a",
    ),
    ListingDraft(
        loan_token="USDC", loan_amount="25000",
        collateral_token="SOL", collateral_amount="500",
        apr="7.2", term_days=90,
        creator="F9TechAtLAS1giauHmE2WvjpdeH9of4XWzWxXxxDh24Z",
        token_address="Dj84BA7c425RTLv9jTYJBMhSKf8rxUbHyPdkFMjLHKP4",
    ),
)

DEMO_CREATOR_A = "DT4n6ABtRRJ1AXe9CpLnSmTADQAvYTRKwPg2qdms7ZLw"
DEMO_CREATOR_B = "2gVkYWexTHR5Hb2aLeQN3tnngvWzisFKXDUPqHxLYUSx"

DEV_RESET_PURCHASE_TX = (
    "2ZgydTugHJKQjGGkonjRPSGp6RvKmKRt2yzX3tp1FjASNLHf7n6QcKR8u4F7RpXktvA2VGLo2Bn7M3"
)


def dev_reset_drafts(wallet_address: str) -> tuple[list[ListingDraft], ListingDraft]:
    """Return (open listings, listing to be purchased by ``wallet_address``).

    The purchased listing's creator is never ``wallet_address`` itself.
    """
    seller = DEMO_CREATOR_A if wallet_address == DEMO_CREATOR_B else DEMO_CREATOR_B
    open_listings = [
        ListingDraft(
            loan_token="USDC", loan_amount="5000",
            collateral_token="SOL", collateral_amount="8.2",
            apr="12.5", term_days=30,
            creator=wallet_address,
            token_address="4Kj8o7aSBXQec1zs8Q9ZNpV5un4LPRiUJyJpzZqsJoWw",
        ),
        ListingDraft(
            loan_token="SOL", loan_amount="150",
            collateral_token="BTC", collateral_amount="0.12",
            apr="9.2", term_days=60,
            creator=DEMO_CREATOR_A,
            token_address="8rVJM94XZz2CrVL7P1Vnpd4tGFqmX3vGBvCzzQhLELP3",
        ),
        ListingDraft(
            loan_token="USDT", loan_amount="10000",
            collateral_token="SOL", collateral_amount="20.5",
            apr="14.8", term_days=90,
            creator=DEMO_CREATOR_B,
            token_address="7aSBXQec1zs8Q9ZNpV5un4LPRiUJyJpzZqsJoWw4Kj8o",
        ),
    ]
    purchased = ListingDraft(
        loan_token="ETH", loan_amount="2.5",
        collateral_token="SOL", collateral_amount="50",
        apr="8.75", term_days=45,
        creator=seller,
        token_address="9vYWKtgmPvEFJvP4X3c8gX4mZ3SjUMT11WQKjaMr1e7k",
    )
    return open_listings, purchased
