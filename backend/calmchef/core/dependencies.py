"""
Crude step dependency check: two steps are related when their
instructions share a meaningful word ("Boil the water" / "Add pasta
to the boiling water").
"""

import re
from typing import Set

STOPWORDS = frozenset(
    """
    a an and the of to in on into onto for with from over under until about
    it its it's this that these those then than them they you your
    is are be been being was were will can should may
    add put place set let make use take get keep let's all each some any
    more less few little bit well until while when once after before
    minute minutes min mins hour hours second seconds heat low medium high
    or but if not no so up out off at by as
    """.split()
)

_word = re.compile(r"[a-z]+")


def _fold(word: str) -> str:
    if word.endswith("ing") and len(word) > 5:
        word = word[:-3]
        # boiling -> boil, chopping -> chop
        if len(word) > 2 and word[-1] == word[-2]:
            word = word[:-1]
        return word
    if word.endswith("es") and len(word) > 4 and word[-3] in "sxz":
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss") and len(word) > 3:
        return word[:-1]
    return word


def keywords(text: str) -> Set[str]:
    words = _word.findall(text.lower())
    return {_fold(w) for w in words if len(w) > 2 and w not in STOPWORDS}


def shared_keywords(a: str, b: str) -> Set[str]:
    return keywords(a) & keywords(b)


def depends_on(later: str, earlier: str) -> bool:
    """True when the later instruction looks like it uses the earlier one's output."""
    return bool(shared_keywords(later, earlier))
