import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..core.config import get_settings
from ..core.errors import (
    BudgetExceededError,
    ChefServiceError,
    MalformedRecipeError,
    QuotaExceededError,
)
from ..models.recipe import ChatReply, ChatRequest, ChefProfile, GenerateMode, GenerateRequest
from ..services.openai_client import ChefClient
from ..services.storage import ChefStore

log = logging.getLogger(__name__)
router = APIRouter(prefix="/api")

MIN_RECIPE_CHARS = 10


def get_chef_client() -> ChefClient:
    return ChefClient(get_settings())


@lru_cache()
def get_store() -> ChefStore:
    return ChefStore(get_settings().storage_dir)


def error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _clean_ingredients(items: List[str]) -> List[str]:
    seen = []
    for item in items:
        item = item.strip()
        if item and item not in seen:
            seen.append(item)
    return seen


@router.post("/generate")
async def generate(
    request: GenerateRequest,
    chef: Optional[str] = None,
    client: ChefClient = Depends(get_chef_client),
    store: ChefStore = Depends(get_store),
):
    data = request.data
    if isinstance(data, list):
        data = _clean_ingredients(data)
    elif isinstance(data, str):
        data = data.strip()
    if not data:
        return error("No data provided", 400)

    try:
        mode = GenerateMode(request.mode)
    except ValueError:
        return error(f"Unknown mode: {request.mode}", 400)

    if mode == GenerateMode.RECIPE:
        if isinstance(data, list):
            data = "\n".join(data)
        if len(data) < MIN_RECIPE_CHARS:
            return error("Recipe text is too short.", 400)

    if chef:
        key = "userIngredients" if mode == GenerateMode.INGREDIENTS else "rawRecipe"
        store.update(chef, {"cookingMode": mode.value, key: data})

    try:
        recipe = await client.generate_recipe(mode, data)
    except BudgetExceededError as e:
        return error(str(e), 429)
    except QuotaExceededError as e:
        return error(str(e), 429)
    except MalformedRecipeError as e:
        log.error(f"💥 Generation failed: {e}")
        return error(str(e), 500)
    except ChefServiceError as e:
        log.error(f"💥 OpenAI Error: {e}")
        return error("The chef is busy. Please try again.", 500)

    if chef:
        store.save_recipe(chef, recipe)
    return recipe.model_dump(mode="json", by_alias=True)


@router.post("/chat", response_model=ChatReply)
async def chat(request: ChatRequest, client: ChefClient = Depends(get_chef_client)):
    if not request.messages:
        return error("No messages provided", 400)

    try:
        reply = await client.chat(request.messages, request.context)
    except BudgetExceededError:
        return error("Budget limit reached.", 429)
    except QuotaExceededError as e:
        return error(str(e), 429)
    except ChefServiceError as e:
        log.error(f"💥 Chat API Error: {e}")
        return error("Susie is having trouble connecting. Please try again.", 500)

    return ChatReply(reply=reply)


@router.get("/profile/{chef}")
async def get_profile(chef: str, store: ChefStore = Depends(get_store)):
    return store.load(chef)


@router.put("/profile/{chef}")
async def update_profile(
    chef: str,
    values: Dict[str, Any] = Body(...),
    store: ChefStore = Depends(get_store),
):
    try:
        ChefProfile.model_validate(values)
    except ValidationError as e:
        field = ".".join(str(part) for part in e.errors()[0]["loc"])
        log.warning(f"⚠️ Rejected profile update for {chef}: {e}")
        return error(f"Invalid profile value: {field}", 400)
    return store.update(chef, values)
