"""
OnChain Agent Main Entry Point

Command-line interface:
    onchain-agent list
    onchain-agent {agent_name} ask "Your question"
    onchain-agent register {agent_name} [personality]
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import structlog

from common.bitquery_client import AnalyticsClient
from common.config import ConfigurationError, Settings
from common.registry_client import RegistryClient
from .agent import DEFAULT_PERSONALITY, USAGE, OnChainAgent


logger = structlog.get_logger()


def configure_logging(level: str = "WARNING"):
    """Configure structured logging to stderr so stdout carries only answers."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.WARNING),
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="onchain-agent",
        description="Ask OnChainBrain agents about Solana tokens",
        epilog=USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", type=str, default=None, help="Override LOG_LEVEL")
    parser.add_argument("command", nargs="*", help="list | register NAME | NAME ask QUESTION")
    return parser


async def dispatch(
    command: List[str],
    settings: Settings,
    analytics: Optional[AnalyticsClient] = None,
    registry: Optional[RegistryClient] = None,
) -> int:
    """
    Run one CLI command against the registry and analytics service.

    Clients are created from ``settings`` unless supplied.
    """
    analytics = analytics or AnalyticsClient.from_settings(settings)
    registry = registry or RegistryClient.from_settings(settings)

    async with registry, analytics:
        agent = OnChainAgent(analytics=analytics, registry=registry)

        # "<name> ask ..." wins, so agents may be called "list" or "register"
        if _is_ask(command):
            agent_name, question = command[0], " ".join(command[2:])
            logger.info("Asking agent", agent=agent_name, question_preview=question[:100])
            return await agent.run(agent_name, question)

        if command[0] == "list":
            return await agent.list_agents()

        personality = " ".join(command[2:]) or DEFAULT_PERSONALITY
        return await agent.register_agent(command[1], personality)


def _is_ask(command: List[str]) -> bool:
    return len(command) >= 3 and command[1] == "ask"


def is_valid_command(command: List[str]) -> bool:
    if _is_ask(command):
        return bool(" ".join(command[2:]).strip())
    if command and command[0] == "list":
        return True
    return len(command) >= 2 and command[0] == "register"


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not is_valid_command(args.command):
        print(USAGE, file=sys.stderr)
        return 1

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    configure_logging(args.log_level or settings.log_level)
    return asyncio.run(dispatch(args.command, settings))


if __name__ == "__main__":
    sys.exit(main())
