"""
Adaptive pacing: learns how fast this cook works relative to the
recipe's estimates and scales future estimates for active steps.
"""

import logging
from typing import Optional, Union

from .durations import parse_duration

log = logging.getLogger(__name__)

MIN_SAMPLE_SECONDS = 5
MIN_RATIO = 0.5
MAX_RATIO = 3.0
HISTORY_WEIGHT = 0.7


class PacingTracker:
    def __init__(self, multiplier: float = 1.0, samples: int = 0):
        self.multiplier = multiplier
        self.samples = samples

    def record_step_time(
        self,
        expected: Optional[Union[int, str]],
        actual_seconds: float,
        is_fixed_time: bool = False,
    ) -> bool:
        """Fold one completed step into the multiplier. Returns True if it was used."""
        # Boiling water takes as long as it takes; only active labour says anything about the cook.
        if is_fixed_time:
            log.debug("Skipping pacing sample for fixed-time step")
            return False

        expected_seconds = parse_duration(expected)
        if expected_seconds == 0 or actual_seconds < MIN_SAMPLE_SECONDS:
            return False

        ratio = actual_seconds / expected_seconds
        ratio = min(max(ratio, MIN_RATIO), MAX_RATIO)
        self.multiplier = round(self.multiplier * HISTORY_WEIGHT + ratio * (1 - HISTORY_WEIGHT), 2)
        self.samples += 1
        log.info(f"📈 Pacing multiplier now {self.multiplier} after {self.samples} samples")
        return True

    def adjust(self, seconds: int, is_fixed_time: bool = False) -> int:
        """Personalised estimate for a step that nominally takes `seconds`."""
        if is_fixed_time:
            return seconds
        return int(round(seconds * self.multiplier))

    def to_profile(self) -> dict:
        return {"pacingMultiplier": self.multiplier, "samples": self.samples}

    @classmethod
    def from_profile(cls, profile: Optional[dict]) -> "PacingTracker":
        if not profile:
            return cls()
        try:
            multiplier = float(profile.get("pacingMultiplier", 1.0))
            samples = int(profile.get("samples", 0))
        except (AttributeError, TypeError, ValueError) as e:
            log.warning(f"⚠️ Ignoring unreadable velocity profile {profile!r}: {e}")
            return cls()
        if multiplier <= 0 or samples < 0:
            log.warning(f"⚠️ Ignoring out-of-range velocity profile {profile!r}")
            return cls()
        return cls(multiplier=multiplier, samples=samples)
