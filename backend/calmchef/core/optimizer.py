"""
Parallel task hints: while a passive step's timer runs, the cook can
often get ahead on the next step.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from ..models.recipe import Recipe, Step, StepId, Timer, TimerStatus
from .dependencies import depends_on
from .durations import format_time
from .pacing import PacingTracker


@dataclass
class ParallelSuggestion:
    step: Step
    index: int
    estimated_seconds: int
    remaining_seconds: int

    @property
    def fits(self) -> bool:
        """Whether the suggested step should be done before the timer rings."""
        return self.estimated_seconds == 0 or self.estimated_seconds <= self.remaining_seconds

    @property
    def message(self) -> str:
        text = f"While that runs, you can start step {self.index + 1}: {self.step.instruction}"
        if self.estimated_seconds:
            text += f" (about {format_time(self.estimated_seconds)} for you)"
        return text

    def to_dict(self) -> dict:
        return {
            "stepId": self.step.id,
            "index": self.index,
            "instruction": self.step.instruction,
            "estimatedSeconds": self.estimated_seconds,
            "remainingSeconds": self.remaining_seconds,
            "fits": self.fits,
            "message": self.message,
        }


class ParallelTaskOptimizer:
    def __init__(self, pacing: Optional[PacingTracker] = None):
        self.pacing = pacing or PacingTracker()

    def suggest(self, recipe: Recipe, index: int, timers: Dict[StepId, Timer]) -> Optional[ParallelSuggestion]:
        if not 0 <= index < len(recipe.steps) - 1:
            return None

        current = recipe.steps[index]
        timer = timers.get(current.id)
        if timer is None or timer.status != TimerStatus.RUNNING:
            return None
        if not current.is_fixed_time:
            return None

        upcoming = recipe.steps[index + 1]
        if upcoming.is_fixed_time:
            return None
        if depends_on(upcoming.instruction, current.instruction):
            return None

        return ParallelSuggestion(
            step=upcoming,
            index=index + 1,
            estimated_seconds=self.pacing.adjust(upcoming.seconds),
            remaining_seconds=timer.remaining_seconds,
        )
