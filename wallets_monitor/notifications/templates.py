"""
Wallets Monitor - Message Templates

Renders multi-buy alerts and tweet-summary replies for each platform.
Each platform has its own dialect (Telegram HTML, Feishu plain text) but
carries the same information. Rendering never fails: bad numbers degrade
to placeholder values.

Usage:
    text = render_message(Platform.TELEGRAM, token_info, analysis)
    reply = render_summary(Platform.FEISHU, token_info, summary)
"""

import math
import re
import time
from datetime import datetime, timezone
from html import escape
from typing import Any, Optional, Union

from ..models import SmartMoneyAnalysis, TokenInfo, TweetSummary
from .base import Platform

CHAIN_LABEL = "Solana"


def _to_number(value: Any) -> Optional[float]:
    """Coerce to a finite float, or None when the value is not numeric."""
    if value is None:
        return None
    try:
        num = float(value.strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(num):
        return None
    return num


def _round_half_up(num: float) -> int:
    return int(math.floor(num + 0.5))


def format_number(value: Any) -> str:
    """
    Format an amount as a compact dollar string.

    >= 1M -> $X.YM, >= 1K -> $NK, otherwise $N; non-numeric -> $0.00
    """
    num = _to_number(value)
    if num is None:
        return "$0.00"
    if num >= 1_000_000:
        return f"${num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"${_round_half_up(num / 1_000)}K"
    return f"${_round_half_up(num)}"


def format_price(value: Any) -> str:
    num = _to_number(value)
    return f"{num if num is not None else 0.0:.6f}"


def format_percent(value: Any) -> str:
    """Plain number for percentages: 42 -> '42', 12.5 -> '12.5'."""
    num = _to_number(value)
    if num is None:
        return "0"
    if num.is_integer():
        return str(int(num))
    return f"{num:g}"


def _epoch_seconds(value: Union[int, float, str, datetime, None]) -> Optional[float]:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp()
    num = _to_number(value)
    if num is None:
        return None
    # Millisecond timestamps
    if num > 1e12:
        num /= 1000
    return num


def format_time_ago(created_at: Any, now: Optional[datetime] = None) -> str:
    """Human-relative age such as '45s ago', '12m ago', '3h ago', '2d ago'."""
    created = _epoch_seconds(created_at)
    if created is None:
        return "unknown"
    current = _epoch_seconds(now) if now is not None else time.time()

    seconds = max(0, int(current - created))
    if seconds < 60:
        return f"{seconds}s ago"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def dexscreener_url(address: str) -> str:
    return f"https://dexscreener.com/solana/{address}"


def gmgn_url(address: str) -> str:
    return f"https://gmgn.ai/sol/token/{address}"


def solscan_account_url(address: str) -> str:
    return f"https://solscan.io/account/{address}"


def _collapse_blank_lines(text: str) -> str:
    return re.sub(r"\n\s*\n", "\n", text).strip()


class TelegramTemplate:
    """HTML dialect for the Telegram Bot API (parse_mode=HTML)."""

    platform = Platform.TELEGRAM

    def format_smart_money(self, analysis: SmartMoneyAnalysis) -> str:
        lines = []
        for address, record in analysis.items():
            lines.append(
                f"▫<a href=\"{solscan_account_url(address)}\">{escape(record.wallet_name, quote=False)}</a> "
                f"bought {format_number(record.total_buy_cost)} at MC {format_number(record.average_market_cap)}"
                f"({escape(record.buy_time, quote=False)}), Holds: {escape(record.holds_percentage, quote=False)}"
            )
        return "\n".join(lines)

    def format_links(self, token: TokenInfo) -> str:
        links = [
            f"<a href=\"{dexscreener_url(token.address)}\">DexScreener</a>",
            f"<a href=\"{gmgn_url(token.address)}\">GMGN</a>",
        ]
        if token.website:
            links.append(f"<a href=\"{escape(token.website)}\">Website</a>")
        if token.twitter:
            links.append(f"<a href=\"{escape(token.twitter)}\">Twitter</a>")
        return " | ".join(links)

    def render(self, token: TokenInfo, analysis: SmartMoneyAnalysis, now: Optional[datetime] = None) -> str:
        symbol = escape(token.symbol, quote=False)
        message = f"""
\U0001f436 Multi Buy Token: <b>${symbol}</b>
<code>{token.address}</code>

\U0001f90d <b>{CHAIN_LABEL}</b>
\U0001f49b <b>MC:</b> <code>{format_number(token.market_cap)}</code>
\U0001f90e <b>Vol/24h:</b> <code>{format_number(token.volume_h24)}</code>
\U0001f90d <b>Vol/1h:</b> <code>{format_number(token.volume_h1)}</code>
\U0001f49b <b>Liq:</b> <code>{format_number(token.liquidity)}</code>
\U0001f90e <b>USD:</b> <code>${format_price(token.price_usd)}</code>
\U0001f90d <b>Age:</b> <code>{format_time_ago(token.created_at, now)}</code>
\U0001f49b <b>6H:</b> <code>{format_percent(token.change_h6)}%</code>
\U0001f90e <b>SmartMoney:</b>
{len(analysis)} wallets bought ${symbol}

{self.format_smart_money(analysis)}

{self.format_links(token)}
"""
        return message.strip()

    def render_summary(self, token: TokenInfo, summary: TweetSummary) -> str:
        message = f"\U0001f49b{escape(token.symbol, quote=False)} tweets summary:\n"
        if summary.account_summary:
            account = escape(_collapse_blank_lines(summary.account_summary), quote=False)
            message += f"<blockquote>{account}</blockquote>\n\n"
        if summary.search_summary:
            search = escape(summary.search_summary.strip(), quote=False)
            message += f"\U0001f49bSearched tweets summary:\n<blockquote>{search}</blockquote>"
        return message.strip()


class FeishuTemplate:
    """Plain-text dialect for Feishu custom bots (no markup support)."""

    platform = Platform.FEISHU

    def format_smart_money(self, analysis: SmartMoneyAnalysis) -> str:
        lines = []
        for address, record in analysis.items():
            lines.append(
                f"- {address}:{record.wallet_name} 买入 {format_number(record.total_buy_cost)} "
                f"市值 {format_number(record.average_market_cap)}({record.buy_time}), "
                f"持有: {record.holds_percentage}"
            )
        return "\n".join(lines)

    def format_links(self, token: TokenInfo) -> str:
        lines = [
            "链接:",
            f"- DexScreener: {dexscreener_url(token.address)}",
            f"- GMGN: {gmgn_url(token.address)}",
        ]
        if token.website:
            lines.append(f"- 网站: {token.website}")
        if token.twitter:
            lines.append(f"- Twitter: {token.twitter}")
        return "\n".join(lines)

    def render(self, token: TokenInfo, analysis: SmartMoneyAnalysis, now: Optional[datetime] = None) -> str:
        message = f"""
\U0001f436 多钱包买入代币: ${token.symbol}
{token.address}

\U0001f49d {CHAIN_LABEL}
\U0001f49b 市值: {format_number(token.market_cap)}
\U0001f49e 24小时交易量: {format_number(token.volume_h24)}
\U0001f49d 1小时交易量: {format_number(token.volume_h1)}
\U0001f49b 流动性: {format_number(token.liquidity)}
\U0001f49e 价格: ${format_price(token.price_usd)}
\U0001f49d 上线时间: {format_time_ago(token.created_at, now)}
\U0001f49b 6小时涨幅: {format_percent(token.change_h6)}%
\U0001f49e 智能钱包:
{len(analysis)} 个钱包买入 ${token.symbol}

{self.format_smart_money(analysis)}

{self.format_links(token)}
"""
        return message.strip()

    def render_summary(self, token: TokenInfo, summary: TweetSummary) -> str:
        message = f"\U0001f49b {token.symbol} 推文摘要:\n"
        if summary.account_summary:
            message += f"官方账号摘要:\n{_collapse_blank_lines(summary.account_summary)}\n\n"
        if summary.search_summary:
            message += f"\U0001f49b 相关推文摘要:\n{summary.search_summary.strip()}"
        return message.strip()


DEFAULT_TEMPLATE = TelegramTemplate()

TEMPLATES = {
    Platform.TELEGRAM: DEFAULT_TEMPLATE,
    Platform.FEISHU: FeishuTemplate(),
}


def get_template(platform: Union[Platform, str, None]):
    """Template for a platform; unknown platforms use the Telegram dialect."""
    if isinstance(platform, str) and not isinstance(platform, Platform):
        platform = Platform.parse(platform)
    return TEMPLATES.get(platform, DEFAULT_TEMPLATE)


def render_message(
    platform: Union[Platform, str, None],
    token: TokenInfo,
    analysis: SmartMoneyAnalysis,
    now: Optional[datetime] = None,
) -> str:
    """Render the multi-buy alert for a platform."""
    return get_template(platform).render(token, analysis, now=now)


def render_summary(
    platform: Union[Platform, str, None],
    token: TokenInfo,
    summary: Union[TweetSummary, str],
) -> str:
    """Render the tweet-summary reply for a platform. Plain text counts as a search summary."""
    if isinstance(summary, str):
        summary = TweetSummary(search_summary=summary)
    return get_template(platform).render_summary(token, summary)
