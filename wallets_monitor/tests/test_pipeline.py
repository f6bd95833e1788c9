import asyncio

from wallets_monitor.models import TweetSummary
from wallets_monitor.notifications import AlertDispatcher, Platform, successful_handles
from wallets_monitor.pipeline import process_multi_buy
from wallets_monitor.tweet_summary import TweetSummarizer

from conftest import FEISHU_HOST, TELEGRAM_HOST


class StubSummarizer:
    def __init__(self, summary):
        self.summary = summary
        self.calls = 0

    async def produce_summary(self, token):
        self.calls += 1
        return self.summary


def test_alert_without_summarizer(chat_api, client, both_channels, token, analysis):
    dispatcher = AlertDispatcher(both_channels, client=client)

    results, replies = asyncio.run(process_multi_buy(token, analysis, dispatcher))

    assert set(results) == {Platform.TELEGRAM, Platform.FEISHU}
    assert replies == {}
    assert len(chat_api.requests) == 2


def test_no_summary_means_no_reply(chat_api, client, both_channels, token, analysis):
    dispatcher = AlertDispatcher(both_channels, client=client)
    summarizer = StubSummarizer(None)

    results, replies = asyncio.run(process_multi_buy(token, analysis, dispatcher, summarizer))

    assert summarizer.calls == 1
    assert replies == {}
    assert len(chat_api.requests) == 2


def test_summary_replies_on_each_platform(chat_api, client, both_channels, token, analysis):
    dispatcher = AlertDispatcher(both_channels, client=client)
    summarizer = StubSummarizer(TweetSummary(search_summary="narrative: memes"))

    results, replies = asyncio.run(process_multi_buy(token, analysis, dispatcher, summarizer))

    assert set(replies) == {Platform.TELEGRAM, Platform.FEISHU}
    assert chat_api.bodies(TELEGRAM_HOST)[1]["reply_parameters"]["message_id"] == 101
    assert chat_api.bodies(FEISHU_HOST)[1]["content"]["root_id"] == "om_root_1"


def test_failed_alerts_skip_enrichment(chat_api, client, both_channels, token, analysis):
    chat_api.telegram_ok = False
    chat_api.feishu_code = 1
    dispatcher = AlertDispatcher(both_channels, client=client)
    summarizer = StubSummarizer(TweetSummary(search_summary="unused"))

    results, replies = asyncio.run(process_multi_buy(token, analysis, dispatcher, summarizer))

    assert summarizer.calls == 0
    assert replies == {}


def test_enrichment_error_after_alert_is_contained(chat_api, client, both_channels, token, analysis):
    class OverloadedGenerator:
        async def complete(self, prompt):
            raise RuntimeError("model overloaded")

    class OneTweetSource:
        async def search(self, query):
            return [{"text": "FOO listed"}]

        async def user_timeline(self, screen_name):
            return []

    dispatcher = AlertDispatcher(both_channels, client=client)
    summarizer = TweetSummarizer(OneTweetSource(), OverloadedGenerator())

    results, replies = asyncio.run(process_multi_buy(token, analysis, dispatcher, summarizer))

    assert set(successful_handles(results)) == {Platform.TELEGRAM, Platform.FEISHU}
    assert replies == {}
    assert len(chat_api.requests) == 2
