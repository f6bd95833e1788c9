import json
from datetime import datetime, timezone

import httpx
import pytest

from wallets_monitor.config import NotificationConfig
from wallets_monitor.models import TokenInfo, parse_analysis

TELEGRAM_HOST = "api.telegram.org"
FEISHU_HOST = "open.feishu.cn"
FEISHU_WEBHOOK = "https://open.feishu.cn/open-apis/bot/v2/hook/test-hook"

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeChatApi:
    """Answers Telegram and Feishu calls and records every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.telegram_ok = True
        self.feishu_code = 0
        self.feishu_message_id = "om_root_1"
        self.unreachable_hosts: set[str] = set()
        self._telegram_id = 100

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host

        if host in self.unreachable_hosts:
            raise httpx.ConnectError("connection refused", request=request)

        if host == TELEGRAM_HOST:
            if not self.telegram_ok:
                return httpx.Response(400, json={"ok": False, "error_code": 400,
                                                 "description": "Bad Request: chat not found"})
            self._telegram_id += 1
            return httpx.Response(200, json={"ok": True, "result": {"message_id": self._telegram_id}})

        if host == FEISHU_HOST:
            if self.feishu_code:
                return httpx.Response(200, json={"code": self.feishu_code, "msg": "sign match fail"})
            data = {"message_id": self.feishu_message_id} if self.feishu_message_id else {}
            return httpx.Response(200, json={"code": 0, "msg": "success", "data": data})

        return httpx.Response(404, text="not found")

    def bodies(self, host: str) -> list[dict]:
        return [json.loads(r.content) for r in self.requests if r.url.host == host]


@pytest.fixture
def chat_api():
    return FakeChatApi()


@pytest.fixture
def client(chat_api):
    return httpx.AsyncClient(transport=httpx.MockTransport(chat_api.handler))


@pytest.fixture
def both_channels():
    return NotificationConfig(
        channels="telegram,feishu",
        telegram_bot_token="123456:TEST",
        telegram_chat_id="-100200300",
        feishu_webhook_url=FEISHU_WEBHOOK,
    )


@pytest.fixture
def token():
    return TokenInfo(
        symbol="FOO",
        address="FooMint111",
        market_cap=2_500_000,
        volume_h24=15_000,
        volume_h1=900,
        liquidity=120_000,
        price_usd=0.000123,
        created_at=NOW.timestamp() - 3 * 3600,
        change_h6=42,
    )


@pytest.fixture
def analysis():
    return parse_analysis({
        "WalletAAA": {
            "walletName": "whale_one",
            "totalBuyCost": 5400,
            "averageMarketCap": 1_900_000,
            "buyTime": "5m ago",
            "holdsPercentage": "100%",
        },
        "WalletBBB": {
            "walletName": "early_bird",
            "totalBuyCost": 820,
            "averageMarketCap": 2_300_000,
            "buyTime": "2m ago",
            "holdsPercentage": "64%",
        },
    })
