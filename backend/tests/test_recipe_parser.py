import asyncio
from backend.calmchef.services.recipe_parser import RecipeParser


def test_regex_parse():
    text = "1. step one\n2) step two"

    async def run():
        return await RecipeParser.parse(text)

    recipe = asyncio.run(run())
    assert [s.instruction for s in recipe.steps] == ["step one", "step two"]
    assert recipe.title == "Untitled"


def test_fallback_parse():
    text = "step one\nstep two"

    async def run():
        return await RecipeParser.parse(text)

    recipe = asyncio.run(run())
    assert [s.instruction for s in recipe.steps] == ["step one", "step two"]
    assert [s.id for s in recipe.steps] == [1, 2]


def test_sections_durations_and_passive_steps():
    text = """Tomato Soup

Ingredients:
- 2 cups stock
- 1 onion
* salt

Instructions:
1. Chop the onion, about 5 minutes.
2. Simmer everything for 20-25 minutes.
3. Blend and serve.
"""
    recipe = asyncio.run(RecipeParser.parse(text))

    assert recipe.title == "Tomato Soup"
    assert [i.name for i in recipe.ingredients] == ["stock", "onion", "salt"]
    assert recipe.ingredients[0].amount == "2 cups"

    chop, simmer, blend = recipe.steps
    assert chop.seconds == 300 and not chop.is_fixed_time
    assert simmer.seconds == 25 * 60 and simmer.is_fixed_time
    assert blend.seconds == 0
    assert recipe.total_time == "30 mins"


def test_unnumbered_instructions_under_header():
    text = "Toast\nSteps\nToast the bread\nButter it"
    recipe = asyncio.run(RecipeParser.parse(text))
    assert recipe.title == "Toast"
    assert [s.instruction for s in recipe.steps] == ["Toast the bread", "Butter it"]
