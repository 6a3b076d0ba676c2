import asyncio

from backend.calmchef.core.state_machine import CookingSession, greeting
from backend.calmchef.core.voice import Command, classify_command
from backend.calmchef.models.recipe import Recipe, TimerStatus


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make_session(recipe, **kwargs):
    spoken = []

    async def tts(text):
        spoken.append(text)

    return CookingSession(recipe, tts, **kwargs), spoken


def test_next_intent_advances_step():
    r = Recipe(title="Eggs", steps=[{"id": 1, "instruction": "one"}, {"id": 2, "instruction": "two"}])
    sm, spoken = make_session(r, chef_name="Sam")

    async def run():
        await sm.reset(hour=9)
        await sm.handle(Command.NEXT)

    asyncio.run(run())

    assert sm.idx == 1
    assert spoken[0].startswith("Good morning, Sam. Let's make Eggs.")
    assert spoken[-1] == "Step 2: two"


def test_finishing_last_step_completes_meal():
    r = Recipe(title="Eggs", steps=[{"id": 1, "instruction": "one"}])
    sm, spoken = make_session(r)

    async def run():
        await sm.reset(hour=20)
        await sm.next()
        await sm.next()

    asyncio.run(run())

    assert sm.complete
    assert sm.idx == 0
    assert spoken[1] == "Meal complete! Enjoy your food."
    assert "already complete" in spoken[2]


def test_back_stops_at_first_step(pasta):
    sm, spoken = make_session(pasta)

    async def run():
        await sm.back()
        await sm.next()
        await sm.back()

    asyncio.run(run())

    assert sm.idx == 0
    assert spoken[0].startswith("You're on the first step.")


def test_start_timer_suggests_parallel_step(pasta):
    sm, spoken = make_session(pasta)

    asyncio.run(sm.handle(Command.START_TIMER))

    timer = sm.timers.get(1)
    assert timer.status == TimerStatus.RUNNING
    assert timer.remaining_seconds == 600
    assert spoken[-1].startswith("Timer started for 10:00. While that runs, you can start step 2")
    assert sm.snapshot()["suggestion"]["stepId"] == 2


def test_untimed_step_has_no_timer(pasta):
    sm, spoken = make_session(pasta)
    sm.idx = 3

    asyncio.run(sm.start_timer())

    assert sm.timers.timers == {}
    assert spoken[-1] == "This step doesn't need a timer."


def test_pause_and_resume_current_timer(pasta):
    sm, spoken = make_session(pasta)

    async def run():
        await sm.start_timer()
        await sm.handle(Command.PAUSE_TIMER)
        await sm.handle(Command.PAUSE_TIMER)
        paused = sm.timers.get(1).status
        await sm.handle(Command.RESUME_TIMER)
        return paused

    paused = asyncio.run(run())

    assert paused == TimerStatus.PAUSED
    assert sm.timers.get(1).status == TimerStatus.RUNNING
    assert spoken[-1] == "Timer running, 10:00 left."


def test_active_step_time_feeds_pacing(pasta):
    clock = FakeClock()
    sm, _ = make_session(pasta, clock=clock)

    async def run():
        await sm.reset(hour=12)
        clock.now = 600  # fixed-time step: ignored
        await sm.next()
        clock.now = 600 + 240  # twice the 120s estimate
        await sm.next()

    asyncio.run(run())

    assert sm.pacing.samples == 1
    assert sm.pacing.multiplier == 1.3


def test_question_is_returned_for_chat(pasta):
    sm, spoken = make_session(pasta)

    forwarded = asyncio.run(sm.handle(Command.QUESTION, "can I use butter?"))

    assert forwarded == "can I use butter?"
    assert spoken == []


def test_timer_query_without_timers_goes_to_chat(pasta):
    sm, spoken = make_session(pasta)

    forwarded = asyncio.run(sm.handle(Command.TIMER_QUERY, "how long do I boil pasta?"))

    assert forwarded == "how long do I boil pasta?"


def test_progress_ingredients_and_unknown(pasta):
    sm, spoken = make_session(pasta)

    async def run():
        await sm.handle(Command.PROGRESS)
        await sm.handle(Command.INGREDIENTS)
        await sm.handle(Command.UNKNOWN)

    asyncio.run(run())

    assert spoken[0] == "We're on step 1 of 4."
    assert spoken[1] == "You'll need 200 g spaghetti, 3 cloves garlic, olive oil."
    assert spoken[2].startswith("Sorry, I didn't catch that.")


def test_snapshot_shape(pasta):
    sm, _ = make_session(pasta)
    snap = sm.snapshot()

    assert snap["index"] == 0
    assert snap["total"] == 4
    assert snap["progress"] == [True, False, False, False]
    assert snap["nextStep"]["id"] == 2
    assert snap["currentStep"]["isFixedTime"] is True
    assert snap["complete"] is False


def test_greeting_by_hour():
    assert greeting(8) == "Good morning"
    assert greeting(12) == "Good afternoon"
    assert greeting(18) == "Good evening"


def test_lets_start_after_greeting_stays_on_first_step(pasta):
    clock = FakeClock()
    sm, spoken = make_session(pasta, clock=clock)

    async def run():
        await sm.reset(hour=9)
        clock.now = 30
        await sm.handle(classify_command("let's start"))
        first = sm.idx
        await sm.handle(classify_command("let's go"))
        return first

    first = asyncio.run(run())

    assert first == 0
    assert spoken[1].startswith("Step 1: Boil a large pot of salted water")
    assert sm.idx == 1
    assert sm.pacing.samples == 0


def test_snapshot_lists_timers_of_other_steps(pasta):
    sm, _ = make_session(pasta)
    sm.timers.add_timer(1, "Step 1", 600)
    sm.idx = 1

    snap = sm.snapshot()

    assert [t["id"] for t in snap["parallelTimers"]] == [1]
    sm.idx = 0
    assert sm.snapshot()["parallelTimers"] == []
