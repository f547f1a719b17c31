"""
Intent Detection for on-chain token questions

Classifies a free-text question into one of a fixed set of analytics
intents and extracts the parameters each intent needs. Rules are tried
in a fixed priority order; the first match wins.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Pattern, Tuple, Union

from pydantic import BaseModel, Field, field_validator
import structlog


logger = structlog.get_logger()


MAX_MARKET_CAP_RESULTS = 30
DEFAULT_RESULT_COUNT = 10

COUNT_PATTERN = re.compile(r"count:\s*(\d+)", re.IGNORECASE)
TERM_PATTERN = re.compile(r'term:\s*"([^"]+)"', re.IGNORECASE)
MINT_ADDRESS_PATTERN = re.compile(r"[A-Za-z0-9]{32,44}")
FIRST_TOP_COUNT_PATTERN = re.compile(r"First.*top\s*(\d+)", re.IGNORECASE)


class Intent(str, Enum):
    """Supported question intents."""
    MARKET_CAP = "market_cap"
    TOP_HOLDERS = "top_holders"
    TOP_BUYERS = "top_buyers"
    TRENDING = "trending"
    UNSUPPORTED = "unsupported"


class InvalidParameters(Exception):
    """A question matched an intent but lacks a field that intent requires."""

    def __init__(self, intent: Intent, message: str):
        super().__init__(message)
        self.intent = intent
        self.message = message


# =============================================================================
# Intent Parameters
# =============================================================================

class MarketCapParameters(BaseModel):
    search_term: str = Field(..., min_length=1)
    result_count: int = DEFAULT_RESULT_COUNT

    @field_validator("result_count")
    @classmethod
    def clamp_result_count(cls, value: int) -> int:
        return max(1, min(value, MAX_MARKET_CAP_RESULTS))


class TopHoldersParameters(BaseModel):
    mint_address: str = Field(..., pattern=r"^[A-Za-z0-9]{32,44}$")


class TopBuyersParameters(BaseModel):
    mint_address: str = Field(..., pattern=r"^[A-Za-z0-9]{32,44}$")
    result_count: int = Field(DEFAULT_RESULT_COUNT, ge=1)


class TrendingParameters(BaseModel):
    """Trending has no user-supplied parameters."""


IntentParameters = Union[
    MarketCapParameters,
    TopHoldersParameters,
    TopBuyersParameters,
    TrendingParameters,
]


@dataclass
class IntentResult:
    """Result of intent detection."""
    intent: Intent
    parameters: Optional[IntentParameters] = None
    matched_rule: Optional[str] = None


# =============================================================================
# Extractors
# =============================================================================

def extract_count(question: str, default: int = DEFAULT_RESULT_COUNT) -> int:
    """Return the integer after ``count:``, or ``default``."""
    match = COUNT_PATTERN.search(question)
    return int(match.group(1)) if match else default


def extract_term(question: str) -> Optional[str]:
    """Return the quoted text after ``term:``."""
    match = TERM_PATTERN.search(question)
    return match.group(1) if match else None


def extract_mint_address(question: str) -> Optional[str]:
    """Return the first token-address-shaped substring."""
    match = MINT_ADDRESS_PATTERN.search(question)
    return match.group(0) if match else None


def _market_cap_parameters(question: str) -> MarketCapParameters:
    term = extract_term(question)
    if not term:
        raise InvalidParameters(Intent.MARKET_CAP, "Please provide a valid search term.")
    return MarketCapParameters(search_term=term, result_count=extract_count(question))


def _require_mint_address(intent: Intent, question: str) -> str:
    mint_address = extract_mint_address(question)
    if not mint_address:
        raise InvalidParameters(intent, "Please provide a valid MintAddress in the question.")
    return mint_address


def _top_holders_parameters(question: str) -> TopHoldersParameters:
    return TopHoldersParameters(
        mint_address=_require_mint_address(Intent.TOP_HOLDERS, question),
    )


def _top_buyers_parameters(question: str) -> TopBuyersParameters:
    mint_address = _require_mint_address(Intent.TOP_BUYERS, question)
    match = FIRST_TOP_COUNT_PATTERN.search(question)
    count = int(match.group(1)) if match else DEFAULT_RESULT_COUNT
    # "top 0" would request nothing; fall back to the default
    return TopBuyersParameters(mint_address=mint_address, result_count=count or DEFAULT_RESULT_COUNT)


def _trending_parameters(question: str) -> TrendingParameters:
    return TrendingParameters()


# =============================================================================
# Rules
# =============================================================================

@dataclass(frozen=True)
class IntentRule:
    """A (predicate, intent, extractor) entry in the classification table."""
    name: str
    pattern: Pattern[str]
    intent: Intent
    extractor: Callable[[str], IntentParameters]

    def matches(self, question: str) -> bool:
        return self.pattern.search(question) is not None


# Order is priority: "Marketcap" wins over "Trending" when both are present.
INTENT_RULES: Tuple[IntentRule, ...] = (
    IntentRule("marketcap", re.compile(r"Marketcap", re.IGNORECASE), Intent.MARKET_CAP, _market_cap_parameters),
    IntentRule("top_holders", re.compile(r"Top.*holders", re.IGNORECASE), Intent.TOP_HOLDERS, _top_holders_parameters),
    IntentRule("first_top_buyers", re.compile(r"First.*top.*buyers", re.IGNORECASE), Intent.TOP_BUYERS, _top_buyers_parameters),
    IntentRule("trending", re.compile(r"Trending", re.IGNORECASE), Intent.TRENDING, _trending_parameters),
)


class IntentDetector:
    """
    Rule-based intent detector.

    Evaluates ``rules`` in order and extracts parameters with the first
    rule whose predicate matches.
    """

    def __init__(self, rules: Tuple[IntentRule, ...] = INTENT_RULES):
        self.rules = rules

    def match_rule(self, question: str) -> Optional[IntentRule]:
        for rule in self.rules:
            if rule.matches(question):
                return rule
        return None

    def classify(self, question: str) -> Intent:
        """Classify a question without extracting parameters."""
        rule = self.match_rule(question)
        return rule.intent if rule else Intent.UNSUPPORTED

    def detect(self, question: str) -> IntentResult:
        """
        Classify a question and extract its parameters.

        Args:
            question: The raw question text

        Returns:
            IntentResult; UNSUPPORTED carries no parameters

        Raises:
            InvalidParameters: If the matched intent is missing a required field
        """
        rule = self.match_rule(question)
        if rule is None:
            logger.info("No intent matched", question_preview=question[:100])
            return IntentResult(intent=Intent.UNSUPPORTED)

        parameters = rule.extractor(question)
        logger.info("Intent detected", intent=rule.intent.value, rule=rule.name)
        return IntentResult(intent=rule.intent, parameters=parameters, matched_rule=rule.name)
