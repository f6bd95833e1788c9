from wallets_monitor.models import TokenInfo, TweetSummary, WalletBuyRecord, parse_analysis


def test_token_info_from_detector_payload():
    token = TokenInfo.from_dict({
        "symbol": "FOO",
        "address": "FooMint111",
        "marketCap": 2_500_000,
        "volumeH24": 15_000,
        "volumeH1": 900,
        "liquidity": 120_000,
        "priceUSD": "0.000123",
        "createdAt": 1714557600000,
        "changeH6": 42,
        "twitter": "https://x.com/footoken",
    })

    assert token.market_cap == 2_500_000
    assert token.price_usd == "0.000123"
    assert token.created_at == 1714557600000
    assert token.website is None
    assert token.twitter == "https://x.com/footoken"


def test_token_info_accepts_snake_case():
    token = TokenInfo.from_dict({"symbol": "BAR", "address": "BarMint", "market_cap": 10})
    assert token.market_cap == 10
    assert token.volume_h24 is None


def test_parse_analysis_keeps_order():
    raw = {
        "W3": {"walletName": "c", "totalBuyCost": 3},
        "W1": {"walletName": "a", "totalBuyCost": 1},
        "W2": WalletBuyRecord(wallet_name="b"),
    }

    analysis = parse_analysis(raw)

    assert list(analysis) == ["W3", "W1", "W2"]
    assert analysis["W3"] == WalletBuyRecord(wallet_name="c", total_buy_cost=3)
    assert analysis["W2"].wallet_name == "b"


def test_tweet_summary_is_empty():
    assert TweetSummary().is_empty
    assert not TweetSummary(account_summary="x").is_empty


def test_explicit_none_text_fields_become_empty():
    token = TokenInfo.from_dict({"symbol": None, "address": "FooMint111"})
    record = WalletBuyRecord.from_dict({"walletName": None, "buyTime": None, "holdsPercentage": None})

    assert token.symbol == ""
    assert record.wallet_name == ""
    assert record.buy_time == ""
    assert record.holds_percentage == ""
