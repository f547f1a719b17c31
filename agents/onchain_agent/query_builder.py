"""
Bitquery Query Builder

Maps an intent and its parameters to a fully parameterized GraphQL
document. Parameters are interpolated as-is; they are validated by the
intent detector before they reach this module.
"""

from typing import Callable, Dict

from common.bitquery_protocol import (
    BalanceUpdateRecord,
    DEXTradeByTokensRecord,
    DEXTradeRecord,
    QueryDocument,
    TokenSupplyUpdateRecord,
)

from .intent_detector import (
    MAX_MARKET_CAP_RESULTS,
    Intent,
    IntentParameters,
    MarketCapParameters,
    TopBuyersParameters,
    TopHoldersParameters,
    TrendingParameters,
)


TOP_HOLDERS_LIMIT = 10
TRENDING_LIMIT = 5

WRAPPED_SOL_MINT = "So11111111111111111111111111111111111111112"

# Fixed trading window for the trending query
TRENDING_SINCE = "2024-08-15T04:19:00Z"
TRENDING_PRICE_CHECKPOINT = "2024-08-15T05:14:00Z"


MARKET_CAP_QUERY = """
query MyQuery {
  Solana {
    TokenSupplyUpdates(
      where: {TokenSupplyUpdate: {Currency: {MintAddress: {includes: "%(term)s"}}}}
      orderBy: {descending: Block_Time, descendingByField: "TokenSupplyUpdate_Marketcap"}
      limitBy: {by: TokenSupplyUpdate_Currency_MintAddress, count: 1}
      limit: {count: %(count)d}
    ) {
      TokenSupplyUpdate {
        Marketcap: PostBalanceInUSD
        Currency {
          Symbol
          MintAddress
        }
      }
    }
  }
}"""

TOP_HOLDERS_QUERY = """
query MyQuery {
  Solana(dataset: realtime) {
    BalanceUpdates(
      limit: { count: %(count)d }
      orderBy: { descendingByField: "BalanceUpdate_Holding_maximum" }
      where: {
        BalanceUpdate: {
          Currency: {
            MintAddress: { is: "%(mint_address)s" }
          }
        }
        Transaction: { Result: { Success: true } }
      }
    ) {
      BalanceUpdate {
        Account {
          Address
        }
        Holding: PostBalance(maximum: Block_Slot)
      }
    }
  }
}"""

TOP_BUYERS_QUERY = """
query MyQuery {
  Solana {
    DEXTrades(
      where: {
        Trade: {
          Buy: {
            Currency: {
              MintAddress: { is: "%(mint_address)s" }
            }
          }
        }
      }
      limit: { count: %(count)d }
      orderBy: { ascending: Block_Time }
    ) {
      Trade {
        Buy {
          Amount
          Account {
            Token {
              Owner
            }
          }
        }
      }
    }
  }
}"""

TRENDING_QUERY = """
query MyQuery {
  Solana {
    DEXTradeByTokens(
      where: {Transaction: {Result: {Success: true}}, Trade: {Side: {Currency: {MintAddress: {is: "%(quote_mint)s"}}}}, Block: {Time: {since: "%(since)s"}}}
      orderBy: {}
      limit: {count: %(count)d}
    ) {
      Trade {
        Currency {
          Name
          MintAddress
          Symbol
        }
        start: PriceInUSD
        min5: PriceInUSD(
          minimum: Block_Time
          if: {Block: {Time: {after: "%(checkpoint)s"}}}
        )
        end: PriceInUSD(maximum: Block_Time)
        Side {
          Currency {
            Symbol
            Name
            MintAddress
          }
        }
      }
    }
  }
}"""


def build_market_cap(params: MarketCapParameters) -> QueryDocument:
    count = max(1, min(params.result_count, MAX_MARKET_CAP_RESULTS))
    return QueryDocument(
        query=MARKET_CAP_QUERY % {"term": params.search_term, "count": count},
        field="TokenSupplyUpdates",
        record_model=TokenSupplyUpdateRecord,
    )


def build_top_holders(params: TopHoldersParameters) -> QueryDocument:
    return QueryDocument(
        query=TOP_HOLDERS_QUERY % {"mint_address": params.mint_address, "count": TOP_HOLDERS_LIMIT},
        field="BalanceUpdates",
        record_model=BalanceUpdateRecord,
    )


def build_top_buyers(params: TopBuyersParameters) -> QueryDocument:
    return QueryDocument(
        query=TOP_BUYERS_QUERY % {"mint_address": params.mint_address, "count": params.result_count},
        field="DEXTrades",
        record_model=DEXTradeRecord,
    )


def build_trending(params: TrendingParameters) -> QueryDocument:
    return QueryDocument(
        query=TRENDING_QUERY % {
            "quote_mint": WRAPPED_SOL_MINT,
            "since": TRENDING_SINCE,
            "checkpoint": TRENDING_PRICE_CHECKPOINT,
            "count": TRENDING_LIMIT,
        },
        field="DEXTradeByTokens",
        record_model=DEXTradeByTokensRecord,
    )


BUILDERS: Dict[Intent, Callable[..., QueryDocument]] = {
    Intent.MARKET_CAP: build_market_cap,
    Intent.TOP_HOLDERS: build_top_holders,
    Intent.TOP_BUYERS: build_top_buyers,
    Intent.TRENDING: build_trending,
}


def build_query(intent: Intent, params: IntentParameters) -> QueryDocument:
    """
    Build the query document for an intent.

    Raises:
        ValueError: For UNSUPPORTED, which has no query
    """
    try:
        builder = BUILDERS[intent]
    except KeyError:
        raise ValueError(f"No query template for intent: {intent.value}")
    return builder(params)
