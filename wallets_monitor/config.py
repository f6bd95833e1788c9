"""
Wallets Monitor - Configuration

Settings are read from the environment once by the caller and passed
around as immutable values.

Environment Variables:
    NOTIFICATION_CHANNELS - Comma-separated channel list (default: telegram)
    TELEGRAM_BOT_TOKEN - Bot token from @BotFather (TELEGRAM_TOKEN also accepted)
    TELEGRAM_CHAT_ID - Chat/channel/group ID
    TELEGRAM_THREAD_ID - Optional forum topic thread ID
    TELEGRAM_SILENT - Send Telegram messages without sound (true/false)
    FEISHU_WEBHOOK_URL - Feishu custom bot webhook URL
    FEISHU_WEBHOOK_SECRET - Optional Feishu signing secret
    NOTIFICATION_TIMEOUT_SECONDS - HTTP timeout for sends (default: 10)
    DEEPSEEK_API_KEY - API key for tweet summaries
    DEEPSEEK_BASE_URL - OpenAI-compatible API base (default: https://api.deepseek.com/v1)
    DEEPSEEK_MODEL - Model name (default: deepseek-chat)
"""

import os
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_CHANNELS = "telegram"
DEFAULT_DEEPSEEK_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_DEEPSEEK_MODEL = "deepseek-chat"


def _get(environ: Mapping[str, str], *names: str) -> Optional[str]:
    """First non-blank value among names, stripped."""
    for name in names:
        value = environ.get(name)
        if value and value.strip():
            return value.strip()
    return None


def _get_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = _get(environ, name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid {name}='{raw}', using {default}")
        return default


def _get_bool(environ: Mapping[str, str], name: str) -> bool:
    return (_get(environ, name) or "").lower() in ("1", "true", "yes", "on")


def _get_thread_id(environ: Mapping[str, str], name: str) -> Optional[str]:
    """Forum topic ids are integers; anything else disables threading into a topic."""
    raw = _get(environ, name)
    if raw is None:
        return None
    try:
        int(raw)
    except ValueError:
        logger.warning(f"Invalid {name}='{raw}', posting without a topic")
        return None
    return raw


@dataclass(frozen=True)
class NotificationConfig:
    """Channel selection and per-platform credentials."""

    channels: str = DEFAULT_CHANNELS

    # Telegram
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    telegram_thread_id: Optional[str] = None
    telegram_silent: bool = False

    # Feishu
    feishu_webhook_url: Optional[str] = None
    feishu_secret: Optional[str] = None

    request_timeout: float = 10.0

    @property
    def channel_names(self) -> list[str]:
        """Configured channel names: lower-cased, trimmed, blanks dropped."""
        return [c.strip().lower() for c in (self.channels or "").split(",") if c.strip()]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "NotificationConfig":
        env = os.environ if environ is None else environ
        return cls(
            channels=_get(env, "NOTIFICATION_CHANNELS") or DEFAULT_CHANNELS,
            telegram_bot_token=_get(env, "TELEGRAM_BOT_TOKEN", "TELEGRAM_TOKEN"),
            telegram_chat_id=_get(env, "TELEGRAM_CHAT_ID"),
            telegram_thread_id=_get_thread_id(env, "TELEGRAM_THREAD_ID"),
            telegram_silent=_get_bool(env, "TELEGRAM_SILENT"),
            feishu_webhook_url=_get(env, "FEISHU_WEBHOOK_URL"),
            feishu_secret=_get(env, "FEISHU_WEBHOOK_SECRET"),
            request_timeout=_get_float(env, "NOTIFICATION_TIMEOUT_SECONDS", 10.0),
        )


@dataclass(frozen=True)
class SummaryConfig:
    """Settings for the AI tweet summarizer."""

    api_key: Optional[str] = None
    base_url: str = DEFAULT_DEEPSEEK_BASE_URL
    model: str = DEFAULT_DEEPSEEK_MODEL
    temperature: float = 1.0
    max_tokens: int = 3000
    timeout: float = 60.0

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SummaryConfig":
        env = os.environ if environ is None else environ
        return cls(
            api_key=_get(env, "DEEPSEEK_API_KEY"),
            base_url=_get(env, "DEEPSEEK_BASE_URL") or DEFAULT_DEEPSEEK_BASE_URL,
            model=_get(env, "DEEPSEEK_MODEL") or DEFAULT_DEEPSEEK_MODEL,
        )
