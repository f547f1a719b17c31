"""
Tests for the Bitquery query builder.
"""

import pytest

from agents.onchain_agent.intent_detector import (
    Intent,
    MarketCapParameters,
    TopBuyersParameters,
    TopHoldersParameters,
    TrendingParameters,
)
from agents.onchain_agent.query_builder import (
    WRAPPED_SOL_MINT,
    build_market_cap,
    build_query,
)
from common.bitquery_protocol import (
    BalanceUpdateRecord,
    DEXTradeByTokensRecord,
    DEXTradeRecord,
    TokenSupplyUpdateRecord,
)
from conftest import MINT_ADDRESS


class TestMarketCapQuery:

    def test_embeds_term_and_count(self):
        doc = build_query(Intent.MARKET_CAP, MarketCapParameters(search_term="pump", result_count=7))

        assert doc.field == "TokenSupplyUpdates"
        assert doc.record_model is TokenSupplyUpdateRecord
        assert 'MintAddress: {includes: "pump"}' in doc.query
        assert "limit: {count: 7}" in doc.query

    def test_orders_and_dedups_by_currency(self):
        doc = build_query(Intent.MARKET_CAP, MarketCapParameters(search_term="pump"))

        assert 'descendingByField: "TokenSupplyUpdate_Marketcap"' in doc.query
        assert "limitBy: {by: TokenSupplyUpdate_Currency_MintAddress, count: 1}" in doc.query
        assert "Marketcap: PostBalanceInUSD" in doc.query

    def test_count_clamped_to_thirty(self):
        # Bypass the model validator to check the builder clamps on its own
        params = MarketCapParameters.model_construct(search_term="pump", result_count=1000)
        doc = build_market_cap(params)
        assert "limit: {count: 30}" in doc.query


class TestTopHoldersQuery:

    def test_filters_by_mint_and_limits_to_ten(self):
        doc = build_query(Intent.TOP_HOLDERS, TopHoldersParameters(mint_address=MINT_ADDRESS))

        assert doc.field == "BalanceUpdates"
        assert doc.record_model is BalanceUpdateRecord
        assert f'MintAddress: {{ is: "{MINT_ADDRESS}" }}' in doc.query
        assert "limit: { count: 10 }" in doc.query
        assert "Solana(dataset: realtime)" in doc.query
        assert "Holding: PostBalance(maximum: Block_Slot)" in doc.query


class TestTopBuyersQuery:

    def test_orders_ascending_by_time(self):
        doc = build_query(
            Intent.TOP_BUYERS,
            TopBuyersParameters(mint_address=MINT_ADDRESS, result_count=15),
        )

        assert doc.field == "DEXTrades"
        assert doc.record_model is DEXTradeRecord
        assert "orderBy: { ascending: Block_Time }" in doc.query
        assert "limit: { count: 15 }" in doc.query
        assert MINT_ADDRESS in doc.query


class TestTrendingQuery:

    def test_fixed_template(self):
        doc = build_query(Intent.TRENDING, TrendingParameters())

        assert doc.field == "DEXTradeByTokens"
        assert doc.record_model is DEXTradeByTokensRecord
        assert WRAPPED_SOL_MINT in doc.query
        assert "limit: {count: 5}" in doc.query

    def test_is_deterministic(self):
        first = build_query(Intent.TRENDING, TrendingParameters())
        second = build_query(Intent.TRENDING, TrendingParameters())
        assert first.query == second.query


def test_unsupported_has_no_template():
    with pytest.raises(ValueError):
        build_query(Intent.UNSUPPORTED, TrendingParameters())
