"""Input cost estimate for a diff, using the model's tokenizer."""

from dataclasses import dataclass
from functools import lru_cache

import tiktoken

from autocommit import AutoCommitError

# USD per 1K input tokens (gpt-4o-mini)
COST_PER_1K_TOKENS = 0.000150
COST_THRESHOLD = 0.01

FALLBACK_ENCODING = "o200k_base"


class CostEstimateError(AutoCommitError):
    """Raised when the tokenizer cannot be loaded or fails."""
    pass


@dataclass(frozen=True)
class CostEstimate:
    tokens: int
    cost: float

    def exceeds(self, threshold: float = COST_THRESHOLD) -> bool:
        return self.cost > threshold


@lru_cache(maxsize=None)
def _get_encoding(model: str):
    try:
        return tiktoken.encoding_for_model(model)
    except KeyError:
        return tiktoken.get_encoding(FALLBACK_ENCODING)


def count_tokens(text: str, model: str) -> int:
    """Count tokens in text using the encoding for model."""
    # tiktoken fetches encodings over the network on first use and can fail
    # with requests, OS or value errors
    try:
        encoding = _get_encoding(model)
        return len(encoding.encode(text, disallowed_special=()))
    except Exception as e:
        raise CostEstimateError(f"Could not load tokenizer for '{model}': {e}") from e


def estimate_cost(text: str, model: str) -> CostEstimate:
    tokens = count_tokens(text, model)
    return CostEstimate(tokens=tokens, cost=tokens / 1000 * COST_PER_1K_TOKENS)
