"""Domain models for the calorie tracker."""

import math
from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Gender = Literal["male", "female"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very_active"]
Goal = Literal["lose", "maintain", "gain"]


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserDetails(CamelModel):
    """Body metrics and goals entered during setup."""

    height: float
    weight: float
    age: int
    gender: Gender
    activity_level: ActivityLevel
    goal: Goal


class NutritionalInfo(CamelModel):
    """Calories and macronutrients for a meal or a day."""

    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbohydrates: float = Field(ge=0)
    fat: float = Field(ge=0)
    portion_size: str = ""


class DailyRequirements(NutritionalInfo):
    """Daily calorie and macro targets derived from user details."""

    calories: int = Field(ge=0)
    protein: int = Field(ge=0)
    carbohydrates: int = Field(ge=0)
    fat: int = Field(ge=0)


class FoodLog(CamelModel):
    """A confirmed meal entry."""

    id: str
    name: str
    timestamp: int
    nutrition: NutritionalInfo
    image: str


@dataclass
class SessionState:
    """Process-wide state mirrored into the state store."""

    user_details: UserDetails | None = None
    daily_requirements: DailyRequirements | None = None
    food_logs: list[FoodLog] = field(default_factory=list)

    @property
    def view(self) -> Literal["setup", "dashboard"]:
        if self.user_details is not None and self.daily_requirements is not None:
            return "dashboard"
        return "setup"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)
