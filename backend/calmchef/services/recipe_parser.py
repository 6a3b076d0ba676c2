"""
Local recipe parsing: regex first, used when the hosted model is
switched off (mock mode) and as a quick structure check for pasted text.
"""

import re
from typing import List, Optional, Tuple

from ..core.durations import parse_duration
from ..models.recipe import Ingredient, Recipe, Step


class RecipeParser:
    step_pattern = re.compile(r"^\s*\d+[.\)]\s*(.*)$", re.M)
    header_pattern = re.compile(
        r"^\s*(ingredients|instructions|directions|method|steps|preparation)\s*:?\s*$", re.I
    )
    bullet_pattern = re.compile(r"^\s*[-*•]\s*(.+)$")
    duration_pattern = re.compile(
        r"(\d+)(?:\s*(?:-|–|to)\s*(\d+))?\s*(hours?|hrs?|minutes?|mins?|seconds?|secs?)\b", re.I
    )
    passive_pattern = re.compile(
        r"\b(boil|bake|simmer|roast|rest|chill|marinate|proof|rise|steep|soak|braise|"
        r"refrigerate|freeze|cool|steam|poach|slow.?cook)\w*\b",
        re.I,
    )
    amount_pattern = re.compile(
        r"^([\d/.½¼¾⅓⅔]+(?:\s+[\d/]+)?\s*"
        r"(?:cups?|tbsp|tsp|tablespoons?|teaspoons?|g|grams?|kg|ml|l|oz|ounces?|lbs?|pounds?|"
        r"cloves?|pinch(?:es)?|cans?|slices?)?\.?)\s+(.+)$",
        re.I,
    )

    @classmethod
    def step_duration(cls, text: str) -> Optional[int]:
        match = cls.duration_pattern.search(text)
        if not match:
            return None
        # Ranges ("10-12 minutes") take the upper bound.
        amount = match.group(2) or match.group(1)
        return parse_duration(f"{amount} {match.group(3).lower()}")

    @classmethod
    def parse_ingredient(cls, line: str) -> Ingredient:
        match = cls.amount_pattern.match(line.strip())
        if match:
            return Ingredient(name=match.group(2).strip(), amount=match.group(1).strip())
        return Ingredient(name=line.strip())

    @classmethod
    def _sections(cls, raw: str) -> Tuple[List[str], List[str], List[str]]:
        """Split into (preamble, ingredient lines, instruction lines)."""
        preamble, ingredients, instructions = [], [], []
        current = preamble
        for line in raw.splitlines():
            header = cls.header_pattern.match(line)
            if header:
                current = ingredients if header.group(1).lower() == "ingredients" else instructions
                continue
            if line.strip():
                current.append(line.rstrip())
        return preamble, ingredients, instructions

    @classmethod
    async def parse(cls, raw: str) -> Recipe:
        preamble, ingredient_lines, instruction_lines = cls._sections(raw)

        ingredients: List[Ingredient] = []
        for line in ingredient_lines:
            bullet = cls.bullet_pattern.match(line)
            ingredients.append(cls.parse_ingredient(bullet.group(1) if bullet else line))

        body = "\n".join(instruction_lines) if instruction_lines else "\n".join(preamble)
        texts: List[str] = [m.group(1).strip() for m in cls.step_pattern.finditer(body)]

        title = "Untitled"
        # A title line only stands out when the steps are marked as such.
        if (instruction_lines or texts) and preamble and not cls.step_pattern.match(preamble[0]):
            title = preamble[0].strip()

        if not texts:
            # Fallback to trivial split
            lines = instruction_lines or preamble
            texts = [cls.bullet_pattern.sub(r"\1", line).strip() for line in lines]

        steps = []
        for pos, text in enumerate(texts, start=1):
            seconds = cls.step_duration(text)
            steps.append(
                Step(
                    id=pos,
                    instruction=text,
                    duration=seconds,
                    is_fixed_time=bool(seconds and cls.passive_pattern.search(text)),
                )
            )

        total = sum(step.seconds for step in steps)
        return Recipe(
            title=title,
            ingredients=ingredients,
            steps=steps,
            total_time=f"{max(total // 60, 1)} mins" if total else "",
        )
