"""
Display formatting for analytics records.

Display only: abbreviated values are lossy and must not be fed back
into any computation.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

from common.bitquery_protocol import (
    BalanceUpdateRecord,
    DEXTradeByTokensRecord,
    DEXTradeRecord,
    TokenSupplyUpdateRecord,
)


UNKNOWN_TOKEN = "Unknown Token"
UNKNOWN_ADDRESS = "Unknown Address"

Numeric = Union[int, float, str]


def _round_half_up(value: Decimal) -> str:
    return str(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_usd(value: Optional[Numeric]) -> str:
    """
    Abbreviate a USD amount: 1_500_000 -> "2M", 4_300 -> "4K", 999 -> "999".

    Halves round up, so 2_500_000 -> "3M".
    """
    if value is None:
        return "N/A"
    try:
        num = Decimal(str(value).strip())
    except InvalidOperation:
        return "N/A"
    if not num.is_finite():
        return "N/A"
    if num >= 1_000_000:
        return f"{_round_half_up(num / 1_000_000)}M"
    if num >= 1_000:
        return f"{_round_half_up(num / 1_000)}K"
    return _round_half_up(num)


def format_holding(value: Optional[Numeric]) -> str:
    if value is None or value == "":
        return "0.000000"
    try:
        return f"{float(value):.6f}"
    except (TypeError, ValueError):
        return "0.000000"


def _text(value: Optional[str], placeholder: str) -> str:
    return value if value else placeholder


def format_market_cap_row(record: TokenSupplyUpdateRecord) -> str:
    update = record.TokenSupplyUpdate
    symbol = _text(update.Currency.Symbol, UNKNOWN_TOKEN)
    mint_address = _text(update.Currency.MintAddress, UNKNOWN_ADDRESS)
    return f"{symbol} | {mint_address} | Cap: {format_usd(update.Marketcap)}"


def format_holder_row(record: BalanceUpdateRecord) -> str:
    update = record.BalanceUpdate
    address = _text(update.Account.Address if update.Account else None, UNKNOWN_ADDRESS)
    return f"{address} # Holdings: {format_holding(update.Holding)}"


def format_buyer_row(record: DEXTradeRecord) -> str:
    buy = record.Trade.Buy
    owner = None
    if buy.Account and buy.Account.Token:
        owner = buy.Account.Token.Owner
    amount = buy.Amount if buy.Amount is not None else "0"
    return f"Amount: {amount} | Owner: {_text(owner, UNKNOWN_ADDRESS)}"


def format_trending_row(record: DEXTradeByTokensRecord) -> str:
    currency = record.Trade.Currency
    mint_address = _text(currency.MintAddress, UNKNOWN_ADDRESS)
    return f"{mint_address} -> {_text(currency.Name, UNKNOWN_TOKEN)}"
