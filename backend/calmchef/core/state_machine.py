import logging
import time
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

from ..models.recipe import Recipe, Step, TimerStatus
from .durations import format_time
from .optimizer import ParallelSuggestion, ParallelTaskOptimizer
from .pacing import PacingTracker
from .timer_manager import TimerManager
from .voice import Command

log = logging.getLogger(__name__)

HELP_TEXT = (
    "Sorry, I didn't catch that. You can say 'next', 'go back', 'repeat', "
    "'start timer', 'pause', or ask me a question."
)


def greeting(hour: int) -> str:
    if hour < 12:
        return "Good morning"
    if hour < 18:
        return "Good afternoon"
    return "Good evening"


class CookingSession:
    """
    Step-by-step cooking flow for one recipe: navigation, per-step timers,
    adaptive pacing and voice command dispatch.
    """

    def __init__(
        self,
        recipe: Recipe,
        tts_callback: Callable[[str], Awaitable[None]],
        pacing: Optional[PacingTracker] = None,
        chef_name: str = "",
        timers: Optional[TimerManager] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.recipe = recipe
        self.tts = tts_callback
        self.pacing = pacing or PacingTracker()
        self.chef_name = chef_name
        self.timers = timers or TimerManager(recipe, tts_callback)
        self.optimizer = ParallelTaskOptimizer(self.pacing)
        self.clock = clock
        self.idx = 0
        self.complete = False
        self.started = False
        self._step_started_at = clock()

    @property
    def current_step(self) -> Step:
        return self.recipe.steps[self.idx]

    @property
    def next_step(self) -> Optional[Step]:
        if self.idx + 1 < len(self.recipe.steps):
            return self.recipe.steps[self.idx + 1]
        return None

    @property
    def is_last_step(self) -> bool:
        return self.idx == len(self.recipe.steps) - 1

    def progress(self) -> List[bool]:
        return [i <= self.idx for i in range(len(self.recipe.steps))]

    def suggestion(self) -> Optional[ParallelSuggestion]:
        return self.optimizer.suggest(self.recipe, self.idx, self.timers.timers)

    def _describe(self, step: Step) -> str:
        text = f"Step {self.idx + 1}: {step.instruction}"
        if step.is_timed and self.timers.get(step.id) is None:
            estimate = self.pacing.adjust(step.seconds, step.is_fixed_time)
            text += f" This takes about {format_time(estimate)}. Say 'start timer' when you're ready."
        return text

    async def reset(self, hour: Optional[int] = None):
        """Start from the first step with a greeting."""
        self.idx = 0
        self.complete = False
        self.started = False
        self._step_started_at = self.clock()
        if hour is None:
            hour = datetime.now().hour
        hello = greeting(hour)
        if self.chef_name:
            hello += f", {self.chef_name}"
        await self.tts(
            f"{hello}. Let's make {self.recipe.title}. "
            f"There are {len(self.recipe.steps)} steps. {self._describe(self.current_step)}"
        )

    def _record_pace(self):
        step = self.current_step
        if not step.is_timed:
            return
        elapsed = self.clock() - self._step_started_at
        self.pacing.record_step_time(step.seconds, elapsed, step.is_fixed_time)

    async def begin(self):
        """The cook's answer to the greeting: stay on step 1 the first time."""
        if self.started:
            await self.next()
            return
        self.started = True
        self._step_started_at = self.clock()
        await self.tts(self._describe(self.current_step))

    async def next(self):
        if self.complete:
            await self.tts("The meal is already complete. Enjoy!")
            return

        self.started = True
        self._record_pace()
        if self.is_last_step:
            self.complete = True
            log.info(f"🍽️ Meal complete: {self.recipe.title}")
            await self.tts("Meal complete! Enjoy your food.")
            return

        self.idx += 1
        self._step_started_at = self.clock()
        await self.tts(self._describe(self.current_step))

    async def back(self):
        self.started = True
        if self.idx == 0:
            await self.tts("You're on the first step. " + self._describe(self.current_step))
            return
        self.idx -= 1
        self.complete = False
        self._step_started_at = self.clock()
        await self.tts(self._describe(self.current_step))

    async def start_timer(self):
        step = self.current_step
        self.started = True
        if not step.is_timed:
            await self.tts("This step doesn't need a timer.")
            return
        existing = self.timers.get(step.id)
        if existing is not None:
            await self.tts(f"The timer is already {existing.status.value}.")
            return

        timer = self.timers.add_timer(step.id, f"Step {self.idx + 1}", step.seconds)
        message = f"Timer started for {format_time(timer.duration_seconds)}."
        suggestion = self.suggestion()
        if suggestion is not None:
            message += " " + suggestion.message
        await self.tts(message)

    async def _set_timer_running(self, running: bool):
        timer = self.timers.get(self.current_step.id)
        if timer is None:
            await self.tts("There's no timer on this step.")
            return
        wanted = TimerStatus.RUNNING if running else TimerStatus.PAUSED
        if timer.status not in (TimerStatus.FINISHED, wanted):
            self.timers.toggle(timer.id)
        if timer.status == TimerStatus.FINISHED:
            await self.tts(f"{timer.label} is already done.")
        else:
            await self.tts(f"Timer {timer.status.value}, {format_time(timer.remaining_seconds)} left.")

    async def timer_status(self) -> bool:
        """Speak the state of every timer. Returns False when there are none."""
        if not self.timers.timers:
            await self.tts("No timers are running.")
            return False
        parts = []
        for timer in self.timers.timers.values():
            if timer.status == TimerStatus.FINISHED:
                parts.append(f"{timer.label} is done")
            else:
                parts.append(f"{timer.label} has {format_time(timer.remaining_seconds)} left")
        await self.tts(". ".join(parts) + ".")
        return True

    async def ingredients(self):
        if not self.recipe.ingredients:
            await self.tts("This recipe doesn't list any ingredients.")
            return
        items = [f"{i.amount} {i.name}".strip() if i.amount else i.name for i in self.recipe.ingredients]
        await self.tts("You'll need " + ", ".join(items) + ".")

    async def handle(self, command: Command, transcript: str = "") -> Optional[str]:
        """
        Dispatch a voice command. Returns the transcript when it should be
        forwarded to the chat assistant instead.
        """
        log.info(f"🎯 Handling command {command.value}")

        if command == Command.BEGIN:
            await self.begin()
        elif command == Command.NEXT:
            await self.next()
        elif command == Command.BACK:
            await self.back()
        elif command == Command.REPEAT:
            await self.tts(self._describe(self.current_step))
        elif command == Command.START_TIMER:
            await self.start_timer()
        elif command == Command.PAUSE_TIMER:
            await self._set_timer_running(False)
        elif command == Command.RESUME_TIMER:
            await self._set_timer_running(True)
        elif command == Command.TIMER_QUERY:
            if not self.timers.timers and transcript.strip():
                return transcript
            await self.timer_status()
        elif command == Command.INGREDIENTS:
            await self.ingredients()
        elif command == Command.PROGRESS:
            await self.tts(f"We're on step {self.idx + 1} of {len(self.recipe.steps)}.")
        elif command == Command.QUESTION:
            return transcript
        else:
            log.warning("Unknown command")
            await self.tts(HELP_TEXT)
        return None

    def snapshot(self) -> dict:
        suggestion = self.suggestion()
        upcoming = self.next_step
        return {
            "index": self.idx,
            "total": len(self.recipe.steps),
            "currentStep": self.current_step.model_dump(by_alias=True),
            "nextStep": upcoming.model_dump(by_alias=True) if upcoming else None,
            "progress": self.progress(),
            "timers": [t.model_dump(mode="json") for t in self.timers.timers.values()],
            "parallelTimers": [t.model_dump(mode="json") for t in self.timers.others(self.current_step.id)],
            "suggestion": suggestion.to_dict() if suggestion else None,
            "pacingMultiplier": self.pacing.multiplier,
            "complete": self.complete,
        }
