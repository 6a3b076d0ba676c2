import pytest

from backend.calmchef.core.voice import Command, classify_command


@pytest.mark.parametrize(
    "transcript, command",
    [
        ("next", Command.NEXT),
        ("Hey chef, next step please", Command.NEXT),
        ("okay Susie. I'm done", Command.NEXT),
        ("let's start", Command.BEGIN),
        ("Start cooking", Command.BEGIN),
        ("I'm ready", Command.BEGIN),
        ("let's start the timer", Command.START_TIMER),
        ("go back", Command.BACK),
        ("previous step", Command.BACK),
        ("start the timer", Command.START_TIMER),
        ("pause", Command.PAUSE_TIMER),
        ("resume the timer", Command.RESUME_TIMER),
        ("continue the timer", Command.RESUME_TIMER),
        ("how much time is left?", Command.TIMER_QUERY),
        ("repeat that", Command.REPEAT),
        ("what ingredients do I need", Command.INGREDIENTS),
        ("which step are we on?", Command.PROGRESS),
        ("can I use butter instead of oil?", Command.QUESTION),
        ("Is it done?", Command.QUESTION),
        ("banana", Command.UNKNOWN),
        ("", Command.UNKNOWN),
    ],
)
def test_classify_command(transcript, command):
    assert classify_command(transcript) == command
