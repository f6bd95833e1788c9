import asyncio
import base64
import hashlib
import hmac

import httpx
import pytest

from wallets_monitor.config import NotificationConfig
from wallets_monitor.notifications import DeliveryError, FeishuNotifier, MessageHandle, Platform, TelegramNotifier

from conftest import FEISHU_HOST, FEISHU_WEBHOOK, TELEGRAM_HOST


def test_telegram_send_returns_message_id(chat_api, client):
    notifier = TelegramNotifier("123456:TEST", "-100200300", client=client)

    handle = asyncio.run(notifier.send("<b>hello</b>"))

    assert handle == MessageHandle(Platform.TELEGRAM, 101)
    request = chat_api.requests[0]
    assert request.url.path == "/bot123456:TEST/sendMessage"
    body = chat_api.bodies(TELEGRAM_HOST)[0]
    assert body["chat_id"] == "-100200300"
    assert body["text"] == "<b>hello</b>"
    assert body["parse_mode"] == "HTML"
    assert "reply_parameters" not in body


def test_telegram_reply_threads_under_handle(chat_api, client):
    notifier = TelegramNotifier("123456:TEST", "-100200300", thread_id="7", client=client)

    asyncio.run(notifier.send("summary", reply_to=MessageHandle(Platform.TELEGRAM, 55)))

    body = chat_api.bodies(TELEGRAM_HOST)[0]
    assert body["reply_parameters"] == {"message_id": 55, "allow_sending_without_reply": True}
    assert body["message_thread_id"] == 7


def test_telegram_api_error_raises(chat_api, client):
    chat_api.telegram_ok = False
    notifier = TelegramNotifier("123456:TEST", "-100200300", client=client)

    with pytest.raises(DeliveryError, match="chat not found") as exc_info:
        asyncio.run(notifier.send("hello"))
    assert exc_info.value.platform is Platform.TELEGRAM
    assert exc_info.value.response["ok"] is False


def test_telegram_transport_error_raises(chat_api, client):
    chat_api.unreachable_hosts.add(TELEGRAM_HOST)
    notifier = TelegramNotifier("123456:TEST", "-100200300", client=client)

    with pytest.raises(DeliveryError, match="request failed"):
        asyncio.run(notifier.send("hello"))


def test_unconfigured_notifier_raises_without_request(chat_api, client):
    notifier = TelegramNotifier("123456:TEST", None, client=client)
    assert not notifier.is_configured

    with pytest.raises(DeliveryError):
        asyncio.run(notifier.send("hello"))
    assert chat_api.requests == []


def test_feishu_send_and_reply(chat_api, client):
    notifier = FeishuNotifier(FEISHU_WEBHOOK, client=client)

    async def _run():
        handle = await notifier.send("alert")
        await notifier.send("summary", reply_to=handle)
        return handle

    handle = asyncio.run(_run())

    assert handle.platform is Platform.FEISHU
    assert handle.message_id == "om_root_1"
    first, second = chat_api.bodies(FEISHU_HOST)
    assert first == {"msg_type": "text", "content": {"text": "alert"}}
    assert second["content"] == {"text": "summary", "root_id": "om_root_1"}


def test_feishu_without_message_id_replies_unthreaded(chat_api, client):
    chat_api.feishu_message_id = None
    notifier = FeishuNotifier(FEISHU_WEBHOOK, client=client)

    async def _run():
        handle = await notifier.send("alert")
        await notifier.send("summary", reply_to=handle)
        return handle

    handle = asyncio.run(_run())
    assert handle.message_id is None
    assert not handle.is_threadable
    assert "root_id" not in chat_api.bodies(FEISHU_HOST)[1]["content"]


def test_feishu_error_code_raises(chat_api, client):
    chat_api.feishu_code = 19021
    notifier = FeishuNotifier(FEISHU_WEBHOOK, client=client)

    with pytest.raises(DeliveryError, match="sign match fail"):
        asyncio.run(notifier.send("alert"))


def test_feishu_non_json_response_raises():
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="<html>bad gateway</html>"))
    notifier = FeishuNotifier(FEISHU_WEBHOOK, client=httpx.AsyncClient(transport=transport))

    with pytest.raises(DeliveryError, match="non-JSON"):
        asyncio.run(notifier.send("alert"))


def test_feishu_signed_payload():
    notifier = FeishuNotifier(FEISHU_WEBHOOK, secret="s3cret")

    payload = notifier.build_payload("alert", timestamp=1700000000)

    expected = base64.b64encode(
        hmac.new(b"1700000000\ns3cret", b"", hashlib.sha256).digest()
    ).decode()
    assert payload["timestamp"] == "1700000000"
    assert payload["sign"] == expected


def test_telegram_silent_setting_disables_sound(chat_api, client):
    config = NotificationConfig(telegram_bot_token="123456:TEST", telegram_chat_id="-100200300", telegram_silent=True)
    notifier = TelegramNotifier.from_config(config, client=client)

    asyncio.run(notifier.send("hello"))

    assert chat_api.bodies(TELEGRAM_HOST)[0]["disable_notification"] is True
