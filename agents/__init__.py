"""
OnChainBrain Agents

This package contains the agent implementations:
- OnChain Agent: answers token questions (market cap, top holders,
  first top buyers, trending tokens) using Bitquery analytics
"""
