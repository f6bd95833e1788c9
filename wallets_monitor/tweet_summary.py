"""
Wallets Monitor - Tweet Summary

Builds the AI summary that is posted as a reply under a multi-buy alert:
tweets mentioning the token address plus the token's own account
timeline, each summarized by an OpenAI-compatible chat model (DeepSeek).

Tweet fetching is delegated to a TweetSource supplied by the caller.

Usage:
    summarizer = TweetSummarizer(tweet_source, DeepSeekClient(SummaryConfig.from_env()))
    summary = await summarizer.produce_summary(token_info)
    if summary:
        await dispatcher.notify_summary(token_info, summary, results)
"""

import logging
from typing import Any, Optional, Protocol

import httpx

from .config import SummaryConfig
from .models import TokenInfo, TweetSummary

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful assistant that analyzes cryptocurrency Twitter data."

SEARCH_PROMPT_SUFFIX = """提供关于叙事观点和风险内容的极简要点总结。不总结主观价格预测和个人收益的内容。保持简洁直接,去除所有不必要的词语。格式如下：
- 叙事观点：
- 风险内容："""

ACCOUNT_PROMPT_SUFFIX = "提供简短的要点总结。保持简洁直接,去除所有不必要的词语。"


class TweetSource(Protocol):
    """Tweet search and timeline client."""

    async def search(self, query: str) -> list[dict[str, Any]]: ...

    async def user_timeline(self, screen_name: str) -> Optional[list[dict[str, Any]]]: ...


class TextGenerator(Protocol):
    async def complete(self, prompt: str) -> str: ...


def twitter_screen_name(url: Optional[str]) -> Optional[str]:
    """
    Screen name from a profile URL such as https://x.com/foo?s=21.

    Community, search and status links are not profiles and yield None.
    """
    if not url or ("x.com/" not in url and "twitter.com/" not in url):
        return None
    if "/communities/" in url or "/search?" in url or "/status/" in url:
        return None
    screen_name = url.rstrip("/").split("/")[-1].split("?")[0]
    return screen_name or None


def _format_tweet(index: int, tweet: dict[str, Any], with_author: bool) -> str:
    lines = [
        f"Tweet {index}:",
        f"Content: {tweet.get('text', '')}",
        f"Time: {tweet.get('created_at', '')}",
    ]
    if with_author:
        author = tweet.get("author") or {}
        lines.append(f"Author: {author.get('name', '')} (@{author.get('screen_name', '')})")
        lines.append(f"Followers: {author.get('followers_count', 0)}")
    lines.append(f"Engagement: {tweet.get('views', 0)} views / {tweet.get('favorites', 0)} likes")
    lines.append("---")
    return "\n".join(lines)


def build_prompt(symbol: str, tweets: list[dict[str, Any]], kind: str = "search") -> str:
    """
    Prompt asking for a terse summary of tweets.

    kind="search" covers tweets found by address search and asks for
    narrative and risk bullets; kind="account" covers the token's own account.
    """
    if kind == "account":
        prefix = f"请总结关于 {symbol} 的账号推文:"
        suffix = ACCOUNT_PROMPT_SUFFIX
    else:
        prefix = f"请总结关于 {symbol} 的搜索推文:"
        suffix = SEARCH_PROMPT_SUFFIX

    body = "\n\n".join(
        _format_tweet(i, tweet, with_author=(kind != "account"))
        for i, tweet in enumerate(tweets, start=1)
    )
    return f"{prefix}\n\n{body}\n\n{suffix}"


class DeepSeekClient:
    """Chat completion client for DeepSeek (or any OpenAI-compatible API)."""

    def __init__(self, config: Optional[SummaryConfig] = None, client: Optional[httpx.AsyncClient] = None):
        self.config = config or SummaryConfig.from_env()
        self._client = client

        if not self.config.is_configured:
            logger.warning("No DeepSeek API key configured - tweet summaries disabled")

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    async def complete(self, prompt: str) -> str:
        """
        Run one chat completion.

        Raises:
            httpx.HTTPError: transport failure or non-2xx status
            KeyError, IndexError: unexpected response body
        """
        payload = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }
        url = f"{self.config.base_url.rstrip('/')}/chat/completions"
        headers = {"Authorization": f"Bearer {self.config.api_key}"}

        if self._client is not None:
            response = await self._client.post(url, json=payload, headers=headers, timeout=self.config.timeout)
        else:
            async with httpx.AsyncClient() as client:
                response = await client.post(url, json=payload, headers=headers, timeout=self.config.timeout)

        response.raise_for_status()
        return response.json()["choices"][0]["message"]["content"]


class TweetSummarizer:
    """Fetches tweets about a token and summarizes them."""

    def __init__(self, source: TweetSource, generator: TextGenerator):
        self.source = source
        self.generator = generator

    async def _summarize(self, symbol: str, tweets: list[dict[str, Any]], kind: str) -> str:
        try:
            text = await self.generator.complete(build_prompt(symbol, tweets, kind))
        except Exception:
            logger.exception(f"Error generating {kind} tweet summary for {symbol}")
            return ""
        return (text or "").strip()

    async def _account_tweets(self, token: TokenInfo) -> list[dict[str, Any]]:
        screen_name = twitter_screen_name(token.twitter)
        if not screen_name:
            return []
        try:
            tweets = await self.source.user_timeline(screen_name)
        except Exception as e:
            logger.error(f"Failed to fetch user tweets for {screen_name}: {e}")
            return []
        if not tweets:
            logger.info(f"No timeline tweets for {screen_name}")
            return []
        return tweets

    async def produce_summary(self, token: TokenInfo) -> Optional[TweetSummary]:
        """
        Summary of the token's Twitter chatter.

        Returns:
            TweetSummary, or None when no tweets mention the address or no
            summary could be generated
        """
        try:
            search_tweets = await self.source.search(token.address)
        except Exception as e:
            logger.error(f"Tweet search failed for {token.address}: {e}")
            return None

        if not search_tweets:
            logger.info(f"No tweets found for address: {token.address}")
            return None

        account_tweets = await self._account_tweets(token)

        search_summary = await self._summarize(token.symbol, search_tweets, "search")
        account_summary = ""
        if account_tweets:
            account_summary = await self._summarize(token.symbol, account_tweets, "account")

        summary = TweetSummary(search_summary=search_summary, account_summary=account_summary)
        if summary.is_empty:
            logger.info(f"Unable to generate tweet analysis summary for {token.symbol}")
            return None
        return summary
