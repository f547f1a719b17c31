"""
Bitquery Analytics Protocol Models

Request/response models for the Bitquery GraphQL endpoint, the per-intent
record schemas used to validate the rows it returns, and the registry's
agent records.

Reference: https://docs.bitquery.io/docs/graphql/
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Fetch Outcome
# =============================================================================

class FetchStatus(str, Enum):
    """
    Outcome of a single analytics query.
    """
    SUCCESS = "success"      # At least one record returned
    EMPTY = "empty"          # Query succeeded but returned no records
    FAILURE = "failure"      # Transport, service or decode fault


class ErrorKind(str, Enum):
    """Classification of a failed fetch."""
    SERVICE_ERROR = "service_error"      # Non-2xx HTTP status
    NETWORK_FAILURE = "network_failure"  # Transport fault
    DECODE_ERROR = "decode_error"        # Body was not JSON or failed validation


class FetchResult(BaseModel):
    """
    Result of executing a query document.

    Faults never propagate as exceptions; they are carried here so the caller
    decides how to present them.
    """
    status: FetchStatus
    records: List[Any] = Field(default_factory=list)
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, records: List[Any]) -> "FetchResult":
        return cls(status=FetchStatus.SUCCESS, records=records)

    @classmethod
    def empty(cls) -> "FetchResult":
        return cls(status=FetchStatus.EMPTY)

    @classmethod
    def failure(cls, error_kind: ErrorKind, error: str) -> "FetchResult":
        return cls(status=FetchStatus.FAILURE, error_kind=error_kind, error=error)


# =============================================================================
# Record Schemas
# =============================================================================

class _Record(BaseModel):
    """Base for analytics records; unknown fields are ignored."""
    model_config = ConfigDict(extra="ignore")


class CurrencyInfo(_Record):
    """Token currency descriptor."""
    Name: Optional[str] = None
    Symbol: Optional[str] = None
    MintAddress: Optional[str] = None


class TokenSupplyUpdateInfo(_Record):
    Marketcap: Optional[Union[float, str]] = None  # Aliased from PostBalanceInUSD
    Currency: CurrencyInfo = Field(default_factory=CurrencyInfo)


class TokenSupplyUpdateRecord(_Record):
    """Row of Solana.TokenSupplyUpdates (market cap lookups)."""
    TokenSupplyUpdate: TokenSupplyUpdateInfo


class AccountInfo(_Record):
    Address: Optional[str] = None


class BalanceUpdateInfo(_Record):
    Account: Optional[AccountInfo] = None
    Holding: Optional[Union[float, str]] = None  # PostBalance at the latest slot


class BalanceUpdateRecord(_Record):
    """Row of Solana.BalanceUpdates (top holders)."""
    BalanceUpdate: BalanceUpdateInfo


class TokenAccountInfo(_Record):
    Owner: Optional[str] = None


class BuyAccountInfo(_Record):
    Token: Optional[TokenAccountInfo] = None


class BuyInfo(_Record):
    Amount: Optional[Union[float, str]] = None
    Account: Optional[BuyAccountInfo] = None


class BuyTrade(_Record):
    Buy: BuyInfo


class DEXTradeRecord(_Record):
    """Row of Solana.DEXTrades (first top buyers)."""
    Trade: BuyTrade


class TradeSide(_Record):
    Currency: Optional[CurrencyInfo] = None


class TokenTrade(_Record):
    Currency: CurrencyInfo = Field(default_factory=CurrencyInfo)
    start: Optional[float] = None
    min5: Optional[float] = None
    end: Optional[float] = None
    Side: Optional[TradeSide] = None


class DEXTradeByTokensRecord(_Record):
    """Row of Solana.DEXTradeByTokens (trending tokens)."""
    Trade: TokenTrade


# =============================================================================
# Request/Response Models
# =============================================================================

class QueryDocument(BaseModel):
    """
    A fully parameterized GraphQL query.

    ``field`` names the list under ``data.Solana`` that holds the rows and
    ``record_model`` is the schema each row is validated against.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    query: str
    field: str
    record_model: Type[BaseModel]


class GraphQLRequest(BaseModel):
    """Body of a POST to the analytics endpoint."""
    query: str


class GraphQLResponse(BaseModel):
    """
    Loosely-typed analytics response.
    Only the ``data.Solana`` subtree is navigated; everything else is optional.
    """
    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[Dict[str, Any]]] = None

    def rows(self, field: str) -> List[Any]:
        """Return ``data.Solana.<field>``, or an empty list if any step is absent."""
        solana = (self.data or {}).get("Solana") or {}
        return solana.get(field) or []


# =============================================================================
# Registry Models
# =============================================================================

class Agent(BaseModel):
    """
    An agent record held by the registry.
    """
    model_config = ConfigDict(extra="ignore")

    name: str
    personality: Optional[str] = "neutral"

    @property
    def display_personality(self) -> str:
        return self.personality or "neutral"


class AgentData(BaseModel):
    """Metadata returned by GET /agent/{name}."""
    model_config = ConfigDict(extra="ignore")

    personality: Optional[str] = None


class AgentExistsResponse(BaseModel):
    exists: bool = False


class StoreAgentRequest(BaseModel):
    """Body of POST /store-agent."""
    agentName: str
    agentDetails: Dict[str, Any] = Field(default_factory=dict)
