"""Global enums — wire values are lower-case as stored on listings."""

from enum import Enum


class ListingStatus(str, Enum):
    ACTIVE = "active"
    PURCHASED = "purchased"
    CANCELLED = "cancelled"
    REPAID = "repaid"
    DEFAULTED = "defaulted"


class TokenSymbol(str, Enum):
    """Tokens offered by the demo UI. Listings accept any non-empty symbol."""
    SOL = "SOL"
    USDC = "USDC"
    USDT = "USDT"
    BTC = "BTC"
    ETH = "ETH"


class WalletProvider(str, Enum):
    PHANTOM = "phantom"
    SOLFLARE = "solflare"
    BACKPACK = "backpack"


class NetworkStatus(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class MarketplaceFilter(str, Enum):
    ALL = "all"
    HIGH_APR = "high-apr"
    LOW_RISK = "low-risk"
    SHORT_TERM = "short-term"


class SortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    HIGHEST_APR = "highest-apr"
    LOWEST_APR = "lowest-apr"
