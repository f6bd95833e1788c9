"""
Wallets Monitor - Notification Dispatcher

Routes multi-buy alerts to every enabled channel and later threads the
tweet summary under each platform's own alert message.

Features:
- Concurrent fan-out: one slow or failing channel never blocks the others
- Per-platform results: the handles from the alert are passed back in to
  address the reply on the same platform
- Failures are logged and recorded as None, never raised

Usage:
    dispatcher = AlertDispatcher(NotificationConfig.from_env())

    results = await dispatcher.notify_multi_buy(token_info, analysis)
    ...
    await dispatcher.notify_summary(token_info, summary, results)
"""

import asyncio
import logging
from typing import Any, Optional, Union

import httpx

from ..config import NotificationConfig
from ..models import SmartMoneyAnalysis, TokenInfo, TweetSummary
from .base import (
    ChannelNotifier,
    DeliveryError,
    DispatchResults,
    MessageHandle,
    Platform,
    successful_handles,
)
from .registry import enabled_channels, notifier_for
from .templates import render_message, render_summary

logger = logging.getLogger(__name__)


class AlertDispatcher:
    """
    Dispatch alerts to all configured notification channels.

    The set of channels is derived from the configuration on every call,
    so the dispatcher itself holds no channel state between calls.
    """

    def __init__(
        self,
        config: Optional[NotificationConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            config: Notification settings (default: read from env vars)
            client: Optional shared httpx client handed to every notifier
        """
        self.config = config or NotificationConfig.from_env()
        self._client = client

        # Statistics
        self.stats: dict[str, int] = {
            "alerts_dispatched": 0,
            "replies_dispatched": 0,
        }
        for platform in Platform:
            self.stats[f"{platform.value}_sent"] = 0
            self.stats[f"{platform.value}_failed"] = 0

        logger.info(f"AlertDispatcher initialized: channels=[{', '.join(self.active_channels) or 'none'}]")

    @property
    def active_channels(self) -> list[str]:
        """Get list of active channel names."""
        return [platform.value for platform in enabled_channels(self.config)]

    @property
    def has_channels(self) -> bool:
        """Check if any notification channel is configured."""
        return bool(enabled_channels(self.config))

    def _notifiers(self) -> dict[Platform, ChannelNotifier]:
        notifiers = {}
        for platform in enabled_channels(self.config):
            notifier = notifier_for(platform, self.config, client=self._client)
            if notifier is not None:
                notifiers[platform] = notifier
        return notifiers

    async def _deliver(
        self,
        notifier: ChannelNotifier,
        text: str,
        reply_to: Optional[MessageHandle] = None,
    ) -> Optional[MessageHandle]:
        """Send through one channel; failures are logged and become None."""
        platform = notifier.platform
        try:
            handle = await notifier.send(text, reply_to=reply_to)
        except DeliveryError as e:
            logger.error(f"Error sending {platform.value} notification: {e}")
            self.stats[f"{platform.value}_failed"] += 1
            return None
        except Exception:
            logger.exception(f"Unexpected error sending {platform.value} notification")
            self.stats[f"{platform.value}_failed"] += 1
            return None

        self.stats[f"{platform.value}_sent"] += 1
        return handle

    async def broadcast_primary(
        self,
        token: TokenInfo,
        analysis: SmartMoneyAnalysis,
        now=None,
    ) -> DispatchResults:
        """
        Send the multi-buy alert to every enabled channel concurrently.

        Args:
            token: Token snapshot
            analysis: Smart money buys, in display order
            now: Reference time for the token age (default: current time)

        Returns:
            Platform -> handle for each enabled platform (None where the send failed)
        """
        notifiers = self._notifiers()
        if not notifiers:
            logger.warning("No notification channels configured or enabled")
            return {}

        platforms = list(notifiers)
        outcomes = await asyncio.gather(*(
            self._deliver(notifiers[platform], render_message(platform, token, analysis, now=now))
            for platform in platforms
        ))
        results: DispatchResults = dict(zip(platforms, outcomes))

        sent_channels = [p.value for p, handle in results.items() if handle is not None]
        if sent_channels:
            self.stats["alerts_dispatched"] += 1
            logger.info(f"Dispatched multi-buy alert via [{', '.join(sent_channels)}]: "
                        f"{token.symbol} ({len(analysis)} wallets)")
        else:
            logger.error(f"Multi-buy alert for {token.symbol} failed on every channel")

        return results

    async def broadcast_reply(
        self,
        token: TokenInfo,
        summary: Union[TweetSummary, str],
        prior_results: DispatchResults,
    ) -> DispatchResults:
        """
        Reply with the tweet summary under each platform's own alert message.

        Only platforms with a successful handle in prior_results are
        attempted; replies are never sent without an earlier alert.

        Returns:
            Platform -> handle for each attempted reply (None where it failed)
        """
        notifiers = self._notifiers()
        if not notifiers:
            logger.warning("No notification channels configured or enabled")
            return {}

        targets: dict[Platform, MessageHandle] = {}
        for platform, handle in successful_handles(prior_results).items():
            if platform not in notifiers:
                logger.warning(f"Skipping {platform.value} summary reply: channel no longer enabled")
                continue
            if handle.platform != platform:
                logger.warning(f"Skipping {platform.value} summary reply: handle belongs to {handle.platform.value}")
                continue
            targets[platform] = handle

        if not targets:
            logger.info(f"No delivered alert to reply to for {token.symbol}")
            return {}

        platforms = list(targets)
        outcomes = await asyncio.gather(*(
            self._deliver(notifiers[platform], render_summary(platform, token, summary), reply_to=targets[platform])
            for platform in platforms
        ))
        results: DispatchResults = dict(zip(platforms, outcomes))

        for platform, handle in results.items():
            if handle is not None:
                logger.info(f"Successfully sent {token.symbol} tweet summary to {platform.value}")
        if any(handle is not None for handle in results.values()):
            self.stats["replies_dispatched"] += 1

        return results

    async def notify_multi_buy(self, token: TokenInfo, analysis: SmartMoneyAnalysis) -> DispatchResults:
        """Entry point for the detector: alert all channels about a multi-buy."""
        return await self.broadcast_primary(token, analysis)

    async def notify_summary(
        self,
        token: TokenInfo,
        summary: Union[TweetSummary, str],
        prior_results: DispatchResults,
    ) -> DispatchResults:
        """Entry point for the enrichment step: thread the summary under earlier alerts."""
        return await self.broadcast_reply(token, summary, prior_results)

    async def send_test_notifications(self) -> dict[str, bool]:
        """
        Send test notifications to all configured channels.

        Returns:
            Dict mapping channel name to success status
        """
        notifiers = self._notifiers()
        platforms = list(notifiers)

        async def _test(notifier: ChannelNotifier) -> bool:
            try:
                await notifier.send_test_message()
                return True
            except DeliveryError as e:
                logger.error(f"Test notification failed: {e}")
                return False
            except Exception:
                logger.exception(f"Unexpected error sending {notifier.platform.value} test notification")
                return False

        outcomes = await asyncio.gather(*(_test(notifiers[p]) for p in platforms))
        return {platform.value: ok for platform, ok in zip(platforms, outcomes)}

    def get_stats(self) -> dict[str, Any]:
        """Get dispatcher statistics."""
        active = self.active_channels
        return {
            **self.stats,
            "channels_active": len(active),
            "active_channels": active,
        }

