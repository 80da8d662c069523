"""LLM Client Package"""

from autocommit.llm.base import LLMResponse, LLMError
from autocommit.llm.cost import (
    COST_PER_1K_TOKENS, COST_THRESHOLD, CostEstimate, CostEstimateError, count_tokens, estimate_cost,
)
from autocommit.llm.openai_client import OpenAIClient

__all__ = [
    "LLMResponse",
    "LLMError",
    "OpenAIClient",
    "CostEstimate",
    "CostEstimateError",
    "COST_PER_1K_TOKENS",
    "COST_THRESHOLD",
    "count_tokens",
    "estimate_cost",
]
