"""
OnChain Agent - Entry Point

Checks the requested agent against the registry, detects the intent of a
token question, and answers it with a Bitquery query.
"""

from .agent import OnChainAgent, DispatchOutcome
from .intent_detector import IntentDetector, Intent, InvalidParameters

__all__ = ["OnChainAgent", "DispatchOutcome", "IntentDetector", "Intent", "InvalidParameters"]
