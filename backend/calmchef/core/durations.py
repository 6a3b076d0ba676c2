"""
Duration parsing for recipe steps.

Steps carry either seconds (what the model is asked for) or a loose
human string like "10 mins" or "1 hour".
"""

import re
from typing import Optional, Union

FALLBACK_SECONDS = 300

_leading_int = re.compile(r"^\s*(\d+)")


def parse_duration(value: Optional[Union[int, float, str]]) -> int:
    """Return the number of seconds a step duration stands for (0 if unknown)."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(int(value), 0)

    text = value.strip().lower()
    match = _leading_int.match(text)
    if not match:
        return 0
    amount = int(match.group(1))
    unit = text[match.end():].strip()

    if "hour" in unit or "hr" in unit:
        return amount * 3600
    if "min" in unit:
        return amount * 60
    if "sec" in unit or unit in ("", "s"):
        return amount
    return FALLBACK_SECONDS


def format_time(seconds: int) -> str:
    """Format seconds as m:ss."""
    seconds = max(int(seconds), 0)
    return f"{seconds // 60}:{seconds % 60:02d}"
