"""
Shared Bitquery and registry clients, wire models and configuration.
"""

from .bitquery_protocol import (
    Agent,
    AgentData,
    ErrorKind,
    FetchResult,
    FetchStatus,
    GraphQLRequest,
    GraphQLResponse,
    QueryDocument,
)
from .bitquery_client import AnalyticsClient
from .registry_client import RegistryClient
from .config import ConfigurationError, Settings

__all__ = [
    "Agent",
    "AgentData",
    "ErrorKind",
    "FetchResult",
    "FetchStatus",
    "GraphQLRequest",
    "GraphQLResponse",
    "QueryDocument",
    "AnalyticsClient",
    "RegistryClient",
    "ConfigurationError",
    "Settings",
]
