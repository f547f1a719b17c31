"""
Agent Registry Client

Read/write access to the OnChainBrain agent registry. Each lookup degrades
to a safe default when the registry cannot be reached or answers with an
error, so callers never see a raised fault.
"""

from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError
import structlog

from .bitquery_protocol import Agent, AgentData, AgentExistsResponse, StoreAgentRequest
from .config import Settings


logger = structlog.get_logger()

# Faults converted to defaults at this boundary
_REGISTRY_ERRORS = (httpx.HTTPError, ValueError, ValidationError, TypeError)


class RegistryClient:
    """
    Client for the agent registry backend.

    Endpoints:
    - GET /exists/{name} - {"exists": bool}
    - GET /agent/{name} - {"personality": str}
    - GET /agents - [{"name": str, "personality": str}, ...]
    - POST /store-agent - register an agent
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "RegistryClient":
        return cls(settings.registry_url, timeout=settings.http_timeout, transport=transport)

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()

    async def connect(self):
        """Initialize the HTTP client."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
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

    async def agent_exists(self, agent_name: str) -> bool:
        """Check whether an agent is registered. Any failure yields False."""
        try:
            response = await self.client.get(f"{self.base_url}/exists/{agent_name}")
            response.raise_for_status()
            return AgentExistsResponse(**response.json()).exists
        except _REGISTRY_ERRORS as e:
            logger.error("Error checking agent existence", agent=agent_name, error=str(e))
            return False

    async def get_agent_data(self, agent_name: str) -> Optional[AgentData]:
        """Fetch an agent's metadata, or None if it cannot be retrieved."""
        try:
            response = await self.client.get(f"{self.base_url}/agent/{agent_name}")
            response.raise_for_status()
            return AgentData(**response.json())
        except _REGISTRY_ERRORS as e:
            logger.error("Error fetching agent data", agent=agent_name, error=str(e))
            return None

    async def get_all_agents(self) -> List[Agent]:
        """List every registered agent. Any failure yields an empty list."""
        try:
            response = await self.client.get(f"{self.base_url}/agents")
            response.raise_for_status()
            return [Agent(**item) for item in response.json()]
        except _REGISTRY_ERRORS as e:
            logger.error("Error fetching all agents", error=str(e))
            return []

    async def store_agent(self, agent_name: str, agent_details: Dict[str, Any]) -> bool:
        """
        Register an agent with the registry.

        Returns:
            True if the registry accepted the agent
        """
        request = StoreAgentRequest(agentName=agent_name, agentDetails=agent_details)
        try:
            response = await self.client.post(
                f"{self.base_url}/store-agent",
                json=request.model_dump(),
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Error storing agent details", agent=agent_name, error=str(e))
            return False

        logger.info("Agent stored", agent=agent_name)
        return True
