"""
Wallets Monitor - Notification System

Sends smart money multi-buy alerts to multiple channels:
- Telegram (via bot API with HTML formatted messages)
- Feishu (via custom bot webhook with plain text)

Each alert is later followed by a tweet summary, threaded as a reply to
the alert on every platform that delivered it.

Usage:
    from wallets_monitor.notifications import AlertDispatcher

    dispatcher = AlertDispatcher()  # configures from env vars

    results = await dispatcher.notify_multi_buy(token_info, analysis)
    await dispatcher.notify_summary(token_info, summary, results)

Environment Variables:
    NOTIFICATION_CHANNELS - Comma-separated list, e.g. "telegram,feishu"

    # Telegram
    TELEGRAM_BOT_TOKEN - Bot token from @BotFather
    TELEGRAM_CHAT_ID - Chat/channel/group ID
    TELEGRAM_THREAD_ID - Optional forum topic thread ID
    TELEGRAM_SILENT - Send without notification sound

    # Feishu
    FEISHU_WEBHOOK_URL - Custom bot webhook URL
    FEISHU_WEBHOOK_SECRET - Optional signing secret
"""

from .base import (
    ConfigurationError,
    DeliveryError,
    DispatchResults,
    MessageHandle,
    NotificationError,
    Platform,
    first_handle,
    successful_handles,
)
from .feishu import FeishuNotifier
from .telegram import TelegramNotifier
from .registry import enabled_channels, notifier_for
from .templates import format_number, format_time_ago, render_message, render_summary
from .dispatcher import AlertDispatcher

__all__ = [
    # Types
    "Platform",
    "MessageHandle",
    "DispatchResults",
    "successful_handles",
    "first_handle",
    # Errors
    "NotificationError",
    "ConfigurationError",
    "DeliveryError",
    # Notifiers
    "TelegramNotifier",
    "FeishuNotifier",
    # Registry
    "enabled_channels",
    "notifier_for",
    # Templates
    "format_number",
    "format_time_ago",
    "render_message",
    "render_summary",
    # Dispatcher
    "AlertDispatcher",
]
