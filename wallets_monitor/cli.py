#!/usr/bin/env python3
"""
Wallets Monitor - Notification CLI

Checks notification setup without running the wallet monitor.

Usage:
    python -m wallets_monitor.cli --test                 # test message to each channel
    python -m wallets_monitor.cli --dry-run              # print a sample alert per platform
    python -m wallets_monitor.cli --demo                 # send a sample alert
    python -m wallets_monitor.cli --demo --summary "..." # ...and reply to it

Environment Variables:
    See wallets_monitor.config; values may also come from a .env file.
    LOG_LEVEL - Logging level (default: INFO)
"""

import os
import sys
import time
import asyncio
import argparse
import logging

from dotenv import load_dotenv

from .config import NotificationConfig
from .models import TokenInfo, TweetSummary, parse_analysis
from .notifications import AlertDispatcher, Platform, render_message, render_summary

logger = logging.getLogger("wallets-monitor")


def sample_event() -> tuple[TokenInfo, dict]:
    """A representative multi-buy event."""
    token = TokenInfo(
        symbol="FOO",
        address="FooTokenMint1111111111111111111111111111111",
        market_cap=2_500_000,
        volume_h24=15_000,
        volume_h1=3_200,
        liquidity=180_000,
        price_usd=0.000123,
        created_at=int(time.time()) - 3 * 3600,
        change_h6=42,
        twitter="https://x.com/footoken",
    )
    analysis = parse_analysis({
        "Wallet1AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA": {
            "walletName": "whale_one",
            "totalBuyCost": 5400,
            "averageMarketCap": 1_900_000,
            "buyTime": "5m ago",
            "holdsPercentage": "100%",
        },
        "Wallet2BBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBB": {
            "walletName": "early_bird",
            "totalBuyCost": 820,
            "averageMarketCap": 2_300_000,
            "buyTime": "2m ago",
            "holdsPercentage": "64%",
        },
    })
    return token, analysis


async def run_demo(dispatcher: AlertDispatcher, summary_text: str = None) -> bool:
    token, analysis = sample_event()
    results = await dispatcher.notify_multi_buy(token, analysis)
    logger.info(f"Alert results: { {p.value: h is not None for p, h in results.items()} }")

    if summary_text:
        replies = await dispatcher.notify_summary(token, TweetSummary(search_summary=summary_text), results)
        logger.info(f"Reply results: { {p.value: h is not None for p, h in replies.items()} }")

    logger.info(f"Stats: {dispatcher.get_stats()}")
    return any(h is not None for h in results.values())


def dry_run(summary_text: str = None) -> None:
    token, analysis = sample_event()
    for platform in Platform:
        print(f"===== {platform.value} =====")
        print(render_message(platform, token, analysis))
        if summary_text:
            print(f"----- {platform.value} reply -----")
            print(render_summary(platform, token, summary_text))
        print()


def main():
    parser = argparse.ArgumentParser(
        description='Test Wallets Monitor notifications',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        '--test', action='store_true',
        help='Send a test message to every enabled channel'
    )
    parser.add_argument(
        '--demo', action='store_true',
        help='Send a sample multi-buy alert to every enabled channel'
    )
    parser.add_argument(
        '--dry-run', action='store_true',
        help='Print the sample alert for every platform without sending'
    )
    parser.add_argument(
        '--summary', type=str,
        help='Summary text to reply with after the sample alert'
    )
    parser.add_argument(
        '--env-file', type=str, default=None,
        help='Path to a .env file (default: search from the working directory)'
    )

    args = parser.parse_args()

    load_dotenv(args.env_file)
    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'INFO'),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.dry_run:
        dry_run(args.summary)
        sys.exit(0)

    dispatcher = AlertDispatcher(NotificationConfig.from_env())
    if not dispatcher.has_channels:
        logger.error("No notification channels configured!")
        sys.exit(1)

    if args.demo:
        success = asyncio.run(run_demo(dispatcher, args.summary))
    else:
        results = asyncio.run(dispatcher.send_test_notifications())
        logger.info(f"Test results: {results}")
        success = any(results.values())

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
