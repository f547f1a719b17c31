"""
OnChain Agent Implementation

Entry point for question answering. Verifies the requested agent against
the registry, detects the question's intent, builds and executes the
matching Bitquery query, and prints the normalized rows.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

import structlog

from common.bitquery_client import AnalyticsClient
from common.bitquery_protocol import FetchStatus
from common.registry_client import RegistryClient

from .formatting import (
    format_buyer_row,
    format_holder_row,
    format_market_cap_row,
    format_trending_row,
)
from .intent_detector import Intent, IntentDetector, InvalidParameters
from .query_builder import TOP_HOLDERS_LIMIT, build_query


logger = structlog.get_logger()

DEFAULT_PERSONALITY = "neutral"

USAGE = (
    "Usage:\n"
    "List agents:     onchain-agent list\n"
    'Ask question:    onchain-agent {agent_name} ask "Your question"\n'
    "Register agent:  onchain-agent register {agent_name} [personality]"
)


class DispatchOutcome(str, Enum):
    """What happened to a question."""
    ANSWERED = "answered"
    NO_DATA = "no_data"
    FAILED = "failed"
    INVALID_PARAMETERS = "invalid_parameters"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Presentation:
    """How an intent's results are rendered."""
    header: Callable[[Any], str]
    row: Callable[[Any], str]
    empty: Callable[[Any], str]


PRESENTATIONS: Dict[Intent, Presentation] = {
    Intent.MARKET_CAP: Presentation(
        header=lambda p: f'Market Data for: "{p.search_term}"',
        row=format_market_cap_row,
        empty=lambda p: f'No data found for search term: "{p.search_term}"',
    ),
    Intent.TOP_HOLDERS: Presentation(
        header=lambda p: f"Top {TOP_HOLDERS_LIMIT} holders for: {p.mint_address}",
        row=format_holder_row,
        empty=lambda p: f"No data found for top holders of: {p.mint_address}",
    ),
    Intent.TOP_BUYERS: Presentation(
        header=lambda p: f"Top {p.result_count} buyers for: {p.mint_address}",
        row=format_buyer_row,
        empty=lambda p: f"No data found for first buyers of: {p.mint_address}",
    ),
    Intent.TRENDING: Presentation(
        header=lambda p: "Top 5 Trending Tokens 24h:",
        row=format_trending_row,
        empty=lambda p: "No data found for trending tokens.",
    ),
}


class OnChainAgent:
    """
    OnChain Agent - answers token questions for a registered agent.

    Flow:
    1. Check the agent exists in the registry
    2. Fetch its metadata (personality defaults to "neutral")
    3. Detect intent and extract parameters
    4. Build and execute the Bitquery query
    5. Print one formatted line per record
    """

    def __init__(
        self,
        analytics: AnalyticsClient,
        registry: RegistryClient,
        detector: Optional[IntentDetector] = None,
    ):
        self.analytics = analytics
        self.registry = registry
        self.detector = detector or IntentDetector()

    async def run(self, agent_name: str, question: str) -> int:
        """
        Answer a question on behalf of a registered agent.

        Returns:
            Process exit status; 0 unless the CLI was misused
        """
        log = logger.bind(agent=agent_name)

        if not await self.registry.agent_exists(agent_name):
            log.warning("Agent not found")
            print(
                f'Agent "{agent_name}" is not found in the registry. Please verify the name '
                "and try again, or register such agent on the OnChainBrain Framework",
                file=sys.stderr,
            )
            return 0

        agent_data = await self.registry.get_agent_data(agent_name)
        # Personality is carried for context only; it does not change queries or output
        personality = (agent_data.personality if agent_data else None) or DEFAULT_PERSONALITY
        log.info("Agent resolved", personality=personality)

        await self.classify_and_dispatch(question)
        return 0

    async def classify_and_dispatch(self, question: str) -> DispatchOutcome:
        """
        Detect the question's intent, query the analytics service and print
        the result.
        """
        try:
            result = self.detector.detect(question)
        except InvalidParameters as e:
            logger.info("Invalid parameters", intent=e.intent.value, reason=e.message)
            print(e.message)
            return DispatchOutcome.INVALID_PARAMETERS

        if result.intent == Intent.UNSUPPORTED:
            print(f'Unsupported question: "{question}"')
            return DispatchOutcome.UNSUPPORTED

        document = build_query(result.intent, result.parameters)
        fetched = await self.analytics.execute(document)
        presentation = PRESENTATIONS[result.intent]

        if fetched.status == FetchStatus.FAILURE:
            print(f"Analytics request failed: {fetched.error}")
            return DispatchOutcome.FAILED

        if fetched.status == FetchStatus.EMPTY:
            print(presentation.empty(result.parameters))
            return DispatchOutcome.NO_DATA

        print(presentation.header(result.parameters))
        for record in fetched.records:
            print(presentation.row(record))
        return DispatchOutcome.ANSWERED

    async def list_agents(self) -> int:
        """Print every registered agent."""
        agents = await self.registry.get_all_agents()

        if not agents:
            print("No agents found in the OnChainBrain Framework.")
            return 0

        print("\nRegistered OnChainBrain Agents:")
        print("==============================")
        for index, agent in enumerate(agents, start=1):
            print(f"{index}. {agent.name} | Personality: {agent.display_personality}")

        print("\nTo interact with an agent, use:")
        print('onchain-agent {agent_name} ask "Your question"\n')
        return 0

    async def register_agent(self, agent_name: str, personality: str = DEFAULT_PERSONALITY) -> int:
        """Store an agent in the registry."""
        stored = await self.registry.store_agent(agent_name, {"personality": personality})
        if stored:
            print(f'Agent "{agent_name}" successfully stored.')
        else:
            print(f'Could not store agent "{agent_name}".', file=sys.stderr)
        return 0
