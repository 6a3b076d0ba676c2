"""
OpenAI chat-completions client for recipe generation and the sous-chef chat.
"""

import json
import logging
from typing import Iterable, List, Optional, Union

import openai
from pydantic import ValidationError

from ..core.config import Settings, get_settings
from ..core.errors import ChefServiceError, MalformedRecipeError, QuotaExceededError
from ..models.recipe import ChatMessage, GenerateMode, Ingredient, Recipe, Step
from .budget import check_budget
from .prompts import SYSTEM_PROMPT, chat_prompt, generate_prompt
from .recipe_parser import RecipeParser

log = logging.getLogger(__name__)


def _mock_recipe(ingredients: List[str]) -> Recipe:
    return Recipe(
        title="Mock Pasta",
        description="A calm test recipe.",
        total_time="15 mins",
        ingredients=[Ingredient(name=name, available=True) for name in ingredients],
        steps=[
            Step(id=1, instruction="Boil water", duration=600, is_fixed_time=True),
            Step(id=2, instruction="Chop onions", duration=300, is_fixed_time=False),
        ],
    )


class ChefClient:
    def __init__(self, settings: Optional[Settings] = None, client: Optional[openai.AsyncOpenAI] = None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            self._client = openai.AsyncOpenAI(api_key=self.settings.openai_api_key)
        return self._client

    async def _complete(self, messages: List[dict], **kwargs) -> str:
        try:
            completion = await self.client.chat.completions.create(
                model=self.settings.openai_model,
                messages=messages,
                **kwargs,
            )
        except openai.APIStatusError as e:
            log.error(f"❌ OpenAI error {e.status_code}: {e}")
            if e.status_code == 429:
                raise QuotaExceededError("Billing Quota Exceeded. Please check OpenAI settings.") from e
            raise ChefServiceError(str(e)) from e
        except openai.OpenAIError as e:
            log.error(f"❌ OpenAI request failed: {e}")
            raise ChefServiceError(str(e)) from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise ChefServiceError("No response from AI")
        return content

    async def generate_recipe(self, mode: GenerateMode, data: Union[str, List[str]]) -> Recipe:
        """Turn a list of ingredients or pasted recipe text into a structured recipe."""
        if isinstance(data, list):
            items = data
            text = ", ".join(items)
        else:
            items = [part.strip() for part in data.split(",") if part.strip()]
            text = data
        check_budget(text)

        if self.settings.use_mock_data:
            log.info("🧪 Mock mode: building recipe locally")
            if mode == GenerateMode.INGREDIENTS:
                return _mock_recipe(items)
            try:
                return await RecipeParser.parse(text)
            except ValidationError as e:
                raise MalformedRecipeError("Could not find any steps in the recipe text.") from e

        log.info(f"🍳 Generating recipe from {mode.value} ({len(text)} chars)")
        content = await self._complete(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": generate_prompt(mode, text)},
            ],
            response_format={"type": "json_object"},
            temperature=self.settings.generate_temperature,
            max_tokens=self.settings.generate_max_tokens,
        )

        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            log.error(f"❌ Model returned invalid JSON: {e}")
            raise MalformedRecipeError("Received invalid recipe data.") from e

        try:
            recipe = Recipe.model_validate(payload)
        except ValidationError as e:
            log.error(f"❌ Model returned an incomplete recipe: {e}")
            raise MalformedRecipeError("Received incomplete recipe data.") from e

        log.info(f"✅ Recipe generated: {recipe.title} ({len(recipe.steps)} steps)")
        return recipe

    async def chat(self, messages: Iterable[ChatMessage], context: str = "") -> str:
        """Answer the latest message with the current step as context."""
        history = [m if isinstance(m, ChatMessage) else ChatMessage.model_validate(m) for m in messages]
        if history and history[-1].role == "user":
            check_budget(history[-1].content)

        if self.settings.use_mock_data:
            return "Take your time. You're doing fine."

        return await self._complete(
            [{"role": "system", "content": chat_prompt(context)}]
            + [m.model_dump() for m in history],
            temperature=self.settings.chat_temperature,
            max_tokens=self.settings.chat_max_tokens,
        )
