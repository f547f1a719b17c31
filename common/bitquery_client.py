"""
Bitquery Analytics Client

Async client for the Bitquery GraphQL endpoint. Every fault is contained
here and reported as a FetchResult; nothing is retried.
"""

from typing import Dict, Optional

import httpx
import structlog

from .bitquery_protocol import (
    ErrorKind,
    FetchResult,
    GraphQLRequest,
    GraphQLResponse,
    QueryDocument,
)
from .config import Settings


logger = structlog.get_logger()


class AnalyticsClient:
    """
    Client for the Bitquery analytics service.

    Usage:
        async with AnalyticsClient.from_settings(settings) as client:
            result = await client.execute(document)
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        timeout: Optional[float] = 60.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.headers = {
            "Content-Type": "application/json",
            "X-API-KEY": api_key,
            **(headers or {}),
        }
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "AnalyticsClient":
        return cls(
            endpoint=settings.bitquery_endpoint,
            api_key=settings.bitquery_api_key,
            timeout=settings.http_timeout,
            transport=transport,
        )

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()

    async def connect(self):
        """Initialize the HTTP client."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers=self.headers,
            transport=self._transport,
        )

    async def disconnect(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("Client not connected. Call connect() first or use async context manager.")
        return self._client

    async def execute(self, document: QueryDocument) -> FetchResult:
        """
        Execute a query document.

        Args:
            document: The parameterized query to send

        Returns:
            FetchResult - SUCCESS with validated records, EMPTY when
            ``data.Solana.<field>`` is missing or empty, FAILURE otherwise
        """
        request = GraphQLRequest(query=document.query)

        logger.info("Sending analytics query", url=self.endpoint, field=document.field)

        try:
            response = await self.client.post(
                self.endpoint,
                json=request.model_dump(exclude_none=True),
            )
        except httpx.HTTPError as e:
            logger.error("Analytics request failed", field=document.field, error=str(e))
            return FetchResult.failure(ErrorKind.NETWORK_FAILURE, str(e) or type(e).__name__)

        if not response.is_success:
            status_text = response.reason_phrase or str(response.status_code)
            logger.error(
                "Analytics service returned an error",
                field=document.field,
                status_code=response.status_code,
                status_text=status_text,
            )
            return FetchResult.failure(ErrorKind.SERVICE_ERROR, status_text)

        try:
            body = GraphQLResponse(**response.json())
            rows = body.rows(document.field)
            records = [document.record_model.model_validate(row) for row in rows]
        except (ValueError, TypeError, AttributeError) as e:
            logger.error("Could not decode analytics response", field=document.field, error=str(e))
            return FetchResult.failure(ErrorKind.DECODE_ERROR, str(e))

        if body.errors:
            logger.warning("Analytics response carried errors", field=document.field, errors=body.errors)

        if not records:
            logger.info("Analytics query returned no rows", field=document.field)
            return FetchResult.empty()

        logger.info("Analytics query executed", field=document.field, rows=len(records))
        return FetchResult.success(records)
