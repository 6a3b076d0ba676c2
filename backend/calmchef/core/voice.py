"""
Keyword-based classification of spoken cooking commands.

Transcripts come from the browser's speech recognition; anything that
is not a navigation or timer command but sounds like a question is
forwarded to the chat assistant.
"""

import re
from enum import Enum
from typing import List, Pattern, Tuple


class Command(str, Enum):
    BEGIN = "begin"
    NEXT = "next"
    BACK = "back"
    REPEAT = "repeat"
    START_TIMER = "start_timer"
    PAUSE_TIMER = "pause_timer"
    RESUME_TIMER = "resume_timer"
    TIMER_QUERY = "timer_query"
    INGREDIENTS = "ingredients"
    PROGRESS = "progress"
    QUESTION = "question"
    UNKNOWN = "unknown"


_wake_word = re.compile(r"^(?:(?:hey|ok|okay)\s+)?(?:chef|susie)\b[\s,.!]*")

# Order matters: "continue the timer" is a timer command, not NEXT.
_rules: List[Tuple[Command, List[str]]] = [
    (Command.START_TIMER, [r"\b(start|set|begin)\b.*\b(timer|clock)\b", r"\btime (this|it)\b"]),
    (Command.RESUME_TIMER, [r"\b(resume|unpause)\b", r"\bcontinue\b.*\btimer\b"]),
    (Command.PAUSE_TIMER, [r"\bpause\b", r"\bstop\b", r"\bhold\b.*\btimer\b"]),
    (Command.TIMER_QUERY, [r"\bhow (long|much time)\b", r"\btime left\b", r"\bremaining\b", r"\btimer\b"]),
    (Command.BACK, [r"\bgo back\b", r"\bprevious\b", r"^back$", r"\bstep back\b", r"\blast step\b"]),
    (
        Command.BEGIN,
        [r"\bstart cooking\b", r"\blet'?s (go|start|begin|cook)\b", r"^(i'?m |i am |we'?re |all )?ready$"],
    ),
    (
        Command.NEXT,
        [r"\bnext\b", r"\bcontinue\b", r"\bmove on\b", r"\bproceed\b", r"^(i'?m |i am |all )?(done|finished)$"],
    ),
    (Command.REPEAT, [r"\brepeat\b", r"\bagain\b", r"\bsay that\b", r"\bwhat was that\b", r"\bcome again\b"]),
    (Command.INGREDIENTS, [r"\bingredients?\b", r"\bwhat do i need\b", r"\bshopping\b"]),
    (
        Command.PROGRESS,
        [r"\b(which|what) step\b", r"\bwhere are we\b", r"\bprogress\b", r"\bhow many steps\b", r"\bsteps left\b"],
    ),
]

_compiled: List[Tuple[Command, List[Pattern[str]]]] = [
    (command, [re.compile(p) for p in patterns]) for command, patterns in _rules
]

_question_start = re.compile(
    r"^(how|what|why|when|where|which|who|can|could|should|shall|is|are|do|does|did|will|would)\b"
)


def normalize(transcript: str) -> str:
    text = transcript.lower().replace("’", "'").strip()
    text = _wake_word.sub("", text)
    text = re.sub(r"[^\w'?\s]", " ", text)
    return re.sub(r"\s+", " ", text).strip()


def classify_command(transcript: str) -> Command:
    """Map a spoken transcript to a cooking command."""
    text = normalize(transcript)
    if not text:
        return Command.UNKNOWN

    bare = text.rstrip("?").strip()
    for command, patterns in _compiled:
        if any(p.search(bare) for p in patterns):
            return command

    if text.endswith("?") or _question_start.match(text):
        return Command.QUESTION
    return Command.UNKNOWN
