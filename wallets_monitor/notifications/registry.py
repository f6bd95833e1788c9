"""
Wallets Monitor - Channel Registry

Decides which platforms are active for a given configuration and builds
their notifiers. A platform is active when it is listed in
NOTIFICATION_CHANNELS and its required settings are present. Nothing here
touches the network.
"""

import logging
from typing import Callable, Optional

import httpx

from ..config import NotificationConfig
from .base import ChannelNotifier, ConfigurationError, Platform
from .feishu import FeishuNotifier
from .telegram import TelegramNotifier

logger = logging.getLogger(__name__)


def _telegram_ready(config: NotificationConfig) -> bool:
    return bool(config.telegram_bot_token and config.telegram_chat_id)


def _feishu_ready(config: NotificationConfig) -> bool:
    return bool(config.feishu_webhook_url)


# Platform -> (settings check, notifier factory)
CHANNELS: dict[Platform, tuple[Callable[[NotificationConfig], bool], Callable[..., ChannelNotifier]]] = {
    Platform.TELEGRAM: (_telegram_ready, TelegramNotifier.from_config),
    Platform.FEISHU: (_feishu_ready, FeishuNotifier.from_config),
}


def enabled_channels(config: NotificationConfig) -> list[Platform]:
    """
    Active platforms, in the order they are listed in the configuration.

    Unknown names are ignored; listed platforms missing credentials are skipped.
    """
    platforms: list[Platform] = []
    for name in config.channel_names:
        platform = Platform.parse(name)
        if platform is None:
            logger.debug(f"Ignoring unknown notification channel '{name}'")
            continue
        if platform in platforms:
            continue
        is_ready, _ = CHANNELS[platform]
        if not is_ready(config):
            logger.debug(f"Channel {platform.value} listed but not configured")
            continue
        platforms.append(platform)
    return platforms


def notifier_for(
    platform: Platform,
    config: NotificationConfig,
    client: Optional[httpx.AsyncClient] = None,
    strict: bool = False,
) -> Optional[ChannelNotifier]:
    """
    Build the notifier for a platform if its settings are present.

    Args:
        platform: Target platform
        config: Notification settings
        client: Optional shared httpx client handed to the notifier
        strict: Raise ConfigurationError instead of returning None

    Returns:
        The notifier, or None when the platform is not configured
    """
    is_ready, factory = CHANNELS[platform]
    if not is_ready(config):
        if strict:
            raise ConfigurationError(f"{platform.value} is not configured")
        return None
    return factory(config, client=client)
