"""
Wallets Monitor - Telegram Notification Handler

Sends messages to a Telegram chat via the bot API, optionally as a reply
to an earlier message.

Usage:
    notifier = TelegramNotifier(
        bot_token="123456:ABC-DEF...",
        chat_id="-1001234567890"
    )
    handle = await notifier.send(text)
    await notifier.send(reply_text, reply_to=handle)
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Union

import httpx

from ..config import NotificationConfig
from .base import DeliveryError, MessageHandle, Platform

logger = logging.getLogger(__name__)


class TelegramNotifier:
    """
    Send messages to Telegram via bot API.

    Supports:
    - HTML formatted messages
    - Threaded replies (reply_parameters)
    - Silent notifications (no sound)
    - Forum topics (message_thread_id)
    """

    platform = Platform.TELEGRAM
    TELEGRAM_API_BASE = "https://api.telegram.org/bot"

    def __init__(
        self,
        bot_token: Optional[str],
        chat_id: Optional[Union[str, int]],
        thread_id: Optional[Union[str, int]] = None,
        silent: bool = False,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Telegram notifier.

        Args:
            bot_token: Telegram bot token
            chat_id: Chat/channel/group ID
            thread_id: Optional forum topic thread ID
            silent: If True, send notifications without sound
            timeout: Request timeout in seconds
            client: Shared httpx client; a short-lived one is opened per send otherwise
        """
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.thread_id = thread_id
        self.silent = silent
        self.timeout = timeout
        self._client = client

        if not self.bot_token:
            logger.warning("No Telegram bot token configured - notifications disabled")
        if not self.chat_id:
            logger.warning("No Telegram chat ID configured - notifications disabled")

    @classmethod
    def from_config(cls, config: NotificationConfig, client: Optional[httpx.AsyncClient] = None) -> "TelegramNotifier":
        return cls(
            bot_token=config.telegram_bot_token,
            chat_id=config.telegram_chat_id,
            thread_id=config.telegram_thread_id,
            silent=config.telegram_silent,
            timeout=config.request_timeout,
            client=client,
        )

    @property
    def is_configured(self) -> bool:
        """Check if Telegram is properly configured."""
        return bool(self.bot_token and self.chat_id)

    @property
    def api_url(self) -> str:
        """Get the Telegram API base URL for this bot."""
        return f"{self.TELEGRAM_API_BASE}{self.bot_token}"

    def build_payload(self, text: str, reply_to: Optional[MessageHandle] = None) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "chat_id": self.chat_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }

        if self.silent:
            payload["disable_notification"] = True

        # Handle forum topics (thread_id)
        if self.thread_id:
            payload["message_thread_id"] = int(self.thread_id)

        if reply_to is not None and reply_to.is_threadable:
            payload["reply_parameters"] = {
                "message_id": int(reply_to.message_id),
                "allow_sending_without_reply": True,
            }

        return payload

    async def send(self, text: str, reply_to: Optional[MessageHandle] = None) -> MessageHandle:
        """
        Send a message, threaded under reply_to when given.

        Returns:
            Handle carrying the Telegram message_id

        Raises:
            DeliveryError: transport failure or the API answered ok=false
        """
        if not self.is_configured:
            raise DeliveryError(self.platform, "bot token or chat ID not configured")

        payload = self.build_payload(text, reply_to)
        result = await self._post(f"{self.api_url}/sendMessage", payload)

        if not result.get("ok"):
            raise DeliveryError(
                self.platform,
                f"API error: {result.get('description', 'Unknown error')}",
                response=result,
            )

        message_id = (result.get("result") or {}).get("message_id")
        logger.info(f"Telegram message sent successfully (ID: {message_id})")
        return MessageHandle(platform=self.platform, message_id=message_id, response=result)

    async def _post(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            if self._client is not None:
                response = await self._client.post(url, json=payload, timeout=self.timeout)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(url, json=payload, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise DeliveryError(self.platform, f"request failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise DeliveryError(
                self.platform, f"non-JSON response: {response.status_code} - {response.text[:200]}"
            ) from e

    async def send_test_message(self) -> MessageHandle:
        """Send a test message to verify configuration."""
        message = f"""
✅ <b>Wallets Monitor Test Message</b>

If you see this, your Telegram notifications are configured correctly!

<b>Channel:</b> Telegram Bot
<b>Time:</b> {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')} UTC
""".strip()

        return await self.send(message)
