from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, confloat, conint, field_validator, model_validator

from ..core.durations import parse_duration

StepId = Union[int, str]


def _number_as_text(value):
    # Models write quantities like "amount": 2 as bare numbers.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Ingredient(BaseModel):
    name: str
    amount: Optional[str] = None
    available: Optional[bool] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_text(cls, value):
        return _number_as_text(value)


class Step(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: StepId
    instruction: str
    duration: Optional[Union[int, float, str]] = None
    timer_seconds: Optional[conint(ge=0)] = Field(None, alias="timerSeconds")
    is_fixed_time: bool = Field(False, alias="isFixedTime")

    @property
    def seconds(self) -> int:
        """Expected duration in seconds, 0 when the step is untimed."""
        if self.timer_seconds is not None:
            return self.timer_seconds
        return parse_duration(self.duration)

    @property
    def is_timed(self) -> bool:
        return self.seconds > 0


class Recipe(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str = ""
    ingredients: List[Ingredient] = []
    steps: List[Step] = Field(..., min_length=1)
    total_time: str = Field("", alias="totalTime")
    image_url: Optional[str] = Field(None, alias="imageUrl")

    @field_validator("total_time", mode="before")
    @classmethod
    def _total_time_as_text(cls, value):
        return _number_as_text(value)

    @model_validator(mode="before")
    @classmethod
    def _number_steps(cls, data):
        # Models sometimes drop step ids; fall back to 1-based position.
        if isinstance(data, dict) and isinstance(data.get("steps"), list):
            steps = []
            for pos, step in enumerate(data["steps"], start=1):
                if isinstance(step, dict) and step.get("id") is None:
                    step = {**step, "id": pos}
                steps.append(step)
            data = {**data, "steps": steps}
        return data

    @model_validator(mode="after")
    def _unique_step_ids(self) -> "Recipe":
        ids = [step.id for step in self.steps]
        if len(ids) != len(set(ids)):
            raise ValueError("step ids must be unique")
        return self

    def step(self, step_id: StepId) -> Optional[Step]:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None


class TimerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


class Timer(BaseModel):
    id: StepId
    label: str
    duration_seconds: conint(ge=0)
    remaining_seconds: conint(ge=0) = 0
    status: TimerStatus = TimerStatus.IDLE


class GenerateMode(str, Enum):
    INGREDIENTS = "ingredients"
    RECIPE = "recipe"


class GenerateRequest(BaseModel):
    mode: Optional[str] = None
    data: Optional[Union[str, List[str]]] = None


class ChatMessage(BaseModel):
    role: str = Field(..., pattern="^(user|assistant)$")
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = []
    context: str = ""


class ChatReply(BaseModel):
    reply: str


class ErrorResponse(BaseModel):
    error: str


class VelocityProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pacing_multiplier: confloat(gt=0) = Field(1.0, alias="pacingMultiplier")
    samples: conint(ge=0) = 0


class ChefProfile(BaseModel):
    """Values a chef may store; unknown keys are rejected."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    chef_name: Optional[str] = Field(None, alias="chefName")
    current_recipe: Optional[Recipe] = Field(None, alias="currentRecipe")
    user_ingredients: Optional[Union[List[str], str]] = Field(None, alias="userIngredients")
    raw_recipe: Optional[str] = Field(None, alias="rawRecipe")
    cooking_mode: Optional[GenerateMode] = Field(None, alias="cookingMode")
    user_velocity_profile: Optional[VelocityProfile] = Field(None, alias="userVelocityProfile")
