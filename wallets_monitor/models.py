"""
Wallets Monitor - Event Models

Typed snapshots handed over by the wallet monitor when several tracked
("smart money") wallets buy the same token:

1. TokenInfo - market snapshot of the token at detection time
2. WalletBuyRecord - what one tracked wallet bought
3. SmartMoneyAnalysis - wallet address -> WalletBuyRecord, in display order
4. TweetSummary - AI summary of the token's Twitter chatter
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the first key present in data (camelCase or snake_case)."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class TokenInfo:
    """Token snapshot produced by the detector"""
    symbol: str
    address: str
    market_cap: Any = None
    volume_h24: Any = None
    volume_h1: Any = None
    liquidity: Any = None
    price_usd: Any = None
    created_at: Optional[Union[int, float, datetime]] = None  # epoch s/ms or datetime
    change_h6: Any = None                                      # percent
    website: Optional[str] = None
    twitter: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "TokenInfo":
        """Build from the detector payload (camelCase keys) or snake_case keys."""
        return cls(
            symbol=_text(_pick(data, "symbol", default="")),
            address=_text(_pick(data, "address", default="")),
            market_cap=_pick(data, "marketCap", "market_cap"),
            volume_h24=_pick(data, "volumeH24", "volume_h24"),
            volume_h1=_pick(data, "volumeH1", "volume_h1"),
            liquidity=_pick(data, "liquidity"),
            price_usd=_pick(data, "priceUSD", "price_usd"),
            created_at=_pick(data, "createdAt", "created_at"),
            change_h6=_pick(data, "changeH6", "change_h6"),
            website=_pick(data, "website"),
            twitter=_pick(data, "twitter"),
        )


@dataclass(frozen=True)
class WalletBuyRecord:
    """One smart money wallet's buy of the token"""
    wallet_name: str
    total_buy_cost: Any = None       # quote currency
    average_market_cap: Any = None
    buy_time: str = ""               # display string
    holds_percentage: str = ""       # display string

    @classmethod
    def from_dict(cls, data: dict) -> "WalletBuyRecord":
        return cls(
            wallet_name=_text(_pick(data, "walletName", "wallet_name", default="")),
            total_buy_cost=_pick(data, "totalBuyCost", "total_buy_cost"),
            average_market_cap=_pick(data, "averageMarketCap", "average_market_cap"),
            buy_time=_text(_pick(data, "buyTime", "buy_time", default="")),
            holds_percentage=_text(_pick(data, "holdsPercentage", "holds_percentage", default="")),
        )


# Wallet address -> buy record. Insertion order is display order.
SmartMoneyAnalysis = dict[str, WalletBuyRecord]


def parse_analysis(raw: dict) -> SmartMoneyAnalysis:
    """Convert a raw {address: {...}} mapping, keeping its order."""
    analysis: SmartMoneyAnalysis = {}
    for address, record in raw.items():
        if isinstance(record, WalletBuyRecord):
            analysis[address] = record
        else:
            analysis[address] = WalletBuyRecord.from_dict(record)
    return analysis


@dataclass(frozen=True)
class TweetSummary:
    """AI summaries of search results and of the token's own account"""
    search_summary: str = ""
    account_summary: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.search_summary or self.account_summary)
