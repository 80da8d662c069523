"""LLM Shared Types"""

from dataclasses import dataclass

from autocommit import AutoCommitError


@dataclass
class LLMResponse:
    """Structured response from the completion API."""
    content: str
    model: str = ""
    tokens_used: int = 0


class LLMError(AutoCommitError):
    """Raised when the completion request fails."""
    pass
