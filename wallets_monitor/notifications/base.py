"""
Wallets Monitor - Notification Primitives

Shared types for every channel: the Platform enum, the handle a channel
returns after a successful send, the per-platform result mapping and the
error taxonomy.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol, Union


class Platform(str, Enum):
    """Available notification platforms"""
    TELEGRAM = "telegram"
    FEISHU = "feishu"

    @classmethod
    def parse(cls, name: str) -> Optional["Platform"]:
        """Case-insensitive lookup; None for unknown names."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class MessageHandle:
    """
    Reference to a delivered message, valid only on the platform that issued it.

    message_id is None when the platform accepted the message without
    returning an id; replies to such a handle are delivered un-threaded.
    """
    platform: Platform
    message_id: Optional[Union[int, str]] = None
    response: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_threadable(self) -> bool:
        return self.message_id is not None


# Platform -> handle for every attempted send; None marks a failed attempt.
# Platforms that were never attempted are absent.
DispatchResults = dict[Platform, Optional[MessageHandle]]


def successful_handles(results: DispatchResults) -> dict[Platform, MessageHandle]:
    """Only the platforms whose send succeeded."""
    return {platform: handle for platform, handle in results.items() if handle is not None}


def first_handle(results: DispatchResults) -> Optional[MessageHandle]:
    """First successful handle in dispatch order, for single-channel callers."""
    for handle in results.values():
        if handle is not None:
            return handle
    return None


class NotificationError(Exception):
    """Base class for notification errors"""


class ConfigurationError(NotificationError):
    """A platform was requested but its settings are missing"""


class DeliveryError(NotificationError):
    """A single channel failed to deliver a message"""

    def __init__(self, platform: Platform, message: str, response: Optional[dict] = None):
        super().__init__(f"{platform.value}: {message}")
        self.platform = platform
        self.response = response


class ChannelNotifier(Protocol):
    """Capability every platform notifier provides."""

    platform: Platform

    @property
    def is_configured(self) -> bool: ...

    async def send(self, text: str, reply_to: Optional[MessageHandle] = None) -> MessageHandle: ...

    async def send_test_message(self) -> MessageHandle: ...
