"""
Wallets Monitor - Smart Money Multi-Buy Notifications

Alerts chat channels when several tracked wallets buy the same token and
follows up with an AI summary of the token's Twitter chatter.
"""

from .config import NotificationConfig, SummaryConfig
from .models import SmartMoneyAnalysis, TokenInfo, TweetSummary, WalletBuyRecord, parse_analysis
from .pipeline import process_multi_buy

__version__ = "1.0.0"

__all__ = [
    "NotificationConfig",
    "SummaryConfig",
    "TokenInfo",
    "WalletBuyRecord",
    "SmartMoneyAnalysis",
    "TweetSummary",
    "parse_analysis",
    "process_multi_buy",
]
