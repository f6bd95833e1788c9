"""
Wallets Monitor - Multi-Buy Notification Workflow

One detected multi-buy event flows through:
1. Alert broadcast to every enabled channel
2. Tweet summary generation (optional, may find nothing)
3. Summary reply threaded under each delivered alert
"""

import logging
from typing import Optional

from .models import SmartMoneyAnalysis, TokenInfo
from .notifications.base import DispatchResults, successful_handles
from .notifications.dispatcher import AlertDispatcher
from .tweet_summary import TweetSummarizer

logger = logging.getLogger(__name__)


async def process_multi_buy(
    token: TokenInfo,
    analysis: SmartMoneyAnalysis,
    dispatcher: AlertDispatcher,
    summarizer: Optional[TweetSummarizer] = None,
) -> tuple[DispatchResults, DispatchResults]:
    """
    Alert, then enrich, then reply.

    Returns:
        (alert results, reply results); reply results are empty when no
        alert was delivered or no summary was produced
    """
    results = await dispatcher.notify_multi_buy(token, analysis)

    if summarizer is None or not successful_handles(results):
        return results, {}

    summary = await summarizer.produce_summary(token)
    if summary is None:
        logger.info(f"Unable to get tweet summary for {token.symbol}")
        return results, {}

    replies = await dispatcher.notify_summary(token, summary, results)
    return results, replies
