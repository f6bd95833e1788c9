"""
Wallets Monitor - Feishu Notification Handler

Sends plain-text messages to a Feishu (Lark) group through a custom bot
webhook. Supports the optional signature check Feishu bots can enable.

Usage:
    notifier = FeishuNotifier(webhook_url="https://open.feishu.cn/open-apis/bot/v2/hook/...")
    handle = await notifier.send(text)
"""

import base64
import hashlib
import hmac
import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from ..config import NotificationConfig
from .base import DeliveryError, MessageHandle, Platform

logger = logging.getLogger(__name__)


class FeishuNotifier:
    """
    Send messages to a Feishu custom bot webhook.

    Features:
    - Plain text payloads (msg_type=text)
    - Reply threading via root_id when a message id is known
    - HMAC-SHA256 signature when a secret is configured
    """

    platform = Platform.FEISHU

    def __init__(
        self,
        webhook_url: Optional[str],
        secret: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Feishu notifier.

        Args:
            webhook_url: Custom bot webhook URL
            secret: Signing secret, if the bot has signature verification on
            timeout: Request timeout in seconds
            client: Shared httpx client; a short-lived one is opened per send otherwise
        """
        self.webhook_url = webhook_url
        self.secret = secret
        self.timeout = timeout
        self._client = client

        if not self.webhook_url:
            logger.warning("No Feishu webhook URL configured - notifications disabled")

    @classmethod
    def from_config(cls, config: NotificationConfig, client: Optional[httpx.AsyncClient] = None) -> "FeishuNotifier":
        return cls(
            webhook_url=config.feishu_webhook_url,
            secret=config.feishu_secret,
            timeout=config.request_timeout,
            client=client,
        )

    @property
    def is_configured(self) -> bool:
        """Check if Feishu is properly configured."""
        return bool(self.webhook_url)

    def _sign(self, timestamp: int) -> str:
        """
        Feishu signature: base64(HMAC-SHA256) keyed by "timestamp\\nsecret" over an empty message.
        """
        string_to_sign = f"{timestamp}\n{self.secret}"
        digest = hmac.new(string_to_sign.encode("utf-8"), b"", hashlib.sha256).digest()
        return base64.b64encode(digest).decode("utf-8")

    def build_payload(
        self,
        text: str,
        reply_to: Optional[MessageHandle] = None,
        timestamp: Optional[int] = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "msg_type": "text",
            "content": {"text": text},
        }

        if reply_to is not None and reply_to.is_threadable:
            payload["content"]["root_id"] = reply_to.message_id

        if self.secret:
            ts = timestamp if timestamp is not None else int(time.time())
            payload["timestamp"] = str(ts)
            payload["sign"] = self._sign(ts)

        return payload

    async def send(self, text: str, reply_to: Optional[MessageHandle] = None) -> MessageHandle:
        """
        Send a message, threaded under reply_to when Feishu gave us an id.

        Returns:
            Handle carrying data.message_id when the webhook returns one

        Raises:
            DeliveryError: transport failure or a non-zero Feishu code
        """
        if not self.is_configured:
            raise DeliveryError(self.platform, "webhook URL not configured")

        payload = self.build_payload(text, reply_to)

        try:
            if self._client is not None:
                response = await self._client.post(self.webhook_url, json=payload, timeout=self.timeout)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(self.webhook_url, json=payload, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise DeliveryError(self.platform, f"request failed: {e}") from e

        try:
            result = response.json()
        except ValueError as e:
            raise DeliveryError(
                self.platform, f"non-JSON response: {response.status_code} - {response.text[:200]}"
            ) from e

        logger.debug(f"Feishu response: {result}")

        # Older webhook responses use StatusCode instead of code
        code = result.get("code", result.get("StatusCode"))
        if code != 0:
            raise DeliveryError(
                self.platform,
                f"API error: {result.get('msg') or result.get('StatusMessage') or 'Unknown error'}",
                response=result,
            )

        message_id = (result.get("data") or {}).get("message_id")
        logger.info(f"Feishu message sent successfully (ID: {message_id})")
        return MessageHandle(platform=self.platform, message_id=message_id, response=result)

    async def send_test_message(self) -> MessageHandle:
        """Send a test message to verify the webhook."""
        message = (
            "✅ Wallets Monitor 测试消息\n\n"
            "如果你看到这条消息，飞书通知已配置成功！\n\n"
            f"时间: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')} UTC"
        )
        return await self.send(message)
