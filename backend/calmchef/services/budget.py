"""Length-based guard against sending oversized prompts to the hosted model."""

import logging
from typing import Optional

from ..core.config import get_settings
from ..core.errors import BudgetExceededError

log = logging.getLogger(__name__)


def estimate_tokens(text: str, chars_per_token: Optional[int] = None) -> float:
    # Rough estimate: one token is about four characters of English text.
    chars_per_token = chars_per_token or get_settings().chars_per_token
    return len(text) / chars_per_token


def check_budget(text: str, limit: Optional[int] = None) -> bool:
    limit = limit if limit is not None else get_settings().budget_token_limit
    estimated = estimate_tokens(text)
    if estimated > limit:
        log.warning(f"💸 Rejected input of ~{estimated:.0f} tokens (limit {limit})")
        raise BudgetExceededError("Request too large. Please shorten your input.")
    return True
