import pytest

from backend.calmchef.models.recipe import Recipe


@pytest.fixture
def pasta() -> Recipe:
    return Recipe.model_validate(
        {
            "title": "Garlic Pasta",
            "description": "Quick weeknight pasta.",
            "totalTime": "20 mins",
            "ingredients": [
                {"name": "spaghetti", "amount": "200 g"},
                {"name": "garlic", "amount": "3 cloves"},
                {"name": "olive oil"},
            ],
            "steps": [
                {"id": 1, "instruction": "Boil a large pot of salted water", "duration": 600, "isFixedTime": True},
                {"id": 2, "instruction": "Slice the garlic thinly", "duration": 120, "isFixedTime": False},
                {"id": 3, "instruction": "Cook the spaghetti in the boiling water", "duration": "9 mins", "isFixedTime": True},
                {"id": 4, "instruction": "Toss spaghetti with garlic and olive oil"},
            ],
        }
    )
