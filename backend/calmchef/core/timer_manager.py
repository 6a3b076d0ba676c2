import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Set, Union

from ..models.recipe import Recipe, StepId, Timer, TimerStatus
from .config import get_settings
from .durations import parse_duration
from .errors import UnknownStepError

log = logging.getLogger(__name__)


class TimerManager:
    """
    Countdown timers for recipe steps, one per step id, advanced by a
    single 1-second tick.
    """

    def __init__(
        self,
        recipe: Recipe,
        tts_cb: Optional[Callable[[str], Awaitable[None]]] = None,
        tick_interval: Optional[float] = None,
        on_tick: Optional[Callable[[], Awaitable[None]]] = None,
        on_alert: Optional[Callable[[Timer], Awaitable[None]]] = None,
    ):
        self.recipe = recipe
        self.tts = tts_cb
        self.on_tick = on_tick
        self.on_alert = on_alert
        self.tick_interval = tick_interval if tick_interval is not None else get_settings().tick_interval
        self.timers: Dict[StepId, Timer] = {}
        self._alerted: Set[StepId] = set()
        self._task: Optional[asyncio.Task] = None

    def add_timer(self, step_id: StepId, label: str, duration: Union[int, str, None]) -> Timer:
        if self.recipe.step(step_id) is None:
            raise UnknownStepError(f"No step with id {step_id!r}")
        if step_id in self.timers:
            return self.timers[step_id]

        seconds = parse_duration(duration)
        timer = Timer(
            id=step_id,
            label=label,
            duration_seconds=seconds,
            remaining_seconds=seconds,
            status=TimerStatus.RUNNING,
        )
        self.timers[step_id] = timer
        log.info(f"⏱️ Timer started: {label} ({seconds}s)")
        return timer

    def get(self, step_id: StepId) -> Optional[Timer]:
        return self.timers.get(step_id)

    def toggle(self, step_id: StepId) -> Optional[Timer]:
        timer = self.timers.get(step_id)
        if timer is None or timer.status == TimerStatus.FINISHED:
            return timer
        if timer.status == TimerStatus.RUNNING:
            timer.status = TimerStatus.PAUSED
        else:
            timer.status = TimerStatus.RUNNING
        log.info(f"⏯️ Timer {timer.label} is now {timer.status.value}")
        return timer

    def remove(self, step_id: StepId) -> None:
        self.timers.pop(step_id, None)
        self._alerted.discard(step_id)

    def remaining(self, step_id: StepId) -> int:
        timer = self.timers.get(step_id)
        return timer.remaining_seconds if timer else 0

    def others(self, step_id: StepId) -> List[Timer]:
        """Timers belonging to steps other than the given one."""
        return [t for t in self.timers.values() if t.id != step_id]

    def tick(self) -> List[Timer]:
        """Advance every running timer by one second; return those that just finished."""
        finished = []
        for timer in self.timers.values():
            if timer.status != TimerStatus.RUNNING:
                continue
            if timer.remaining_seconds > 0:
                timer.remaining_seconds -= 1
            if timer.remaining_seconds == 0:
                timer.status = TimerStatus.FINISHED
                finished.append(timer)
        return finished

    def pending_alerts(self) -> List[Timer]:
        """Finished timers that have not been announced yet. Each is returned once."""
        pending = [
            t for t in self.timers.values()
            if t.status == TimerStatus.FINISHED and t.id not in self._alerted
        ]
        self._alerted.update(t.id for t in pending)
        return pending

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run())

    async def _run(self):
        while True:
            await asyncio.sleep(self.tick_interval)
            self.tick()
            for timer in self.pending_alerts():
                log.info(f"🔔 Timer finished: {timer.label}")
                try:
                    if self.on_alert:
                        await self.on_alert(timer)
                    elif self.tts:
                        await self.tts(f"{timer.label} is ready.")
                except Exception as e:
                    log.error(f"❌ Timer alert for {timer.label} failed: {e}")
            if self.on_tick and self.timers:
                try:
                    await self.on_tick()
                except Exception as e:
                    log.error(f"❌ Timer tick callback failed: {e}")

    async def cancel_all(self):
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                log.error(f"❌ Timer loop had stopped with an error: {e}")
            self._task = None
        self.timers.clear()
        self._alerted.clear()
