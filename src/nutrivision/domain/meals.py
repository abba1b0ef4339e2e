"""Domain models for the meal log."""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from nutrivision.domain.nutrition import MacroTotals, NutritionInfo


class MealType(str, Enum):
    """Meal slot selected at upload time."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"


class Meal(BaseModel):
    """An analyzed meal. Immutable once appended to the log."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str
    image_url: str = Field(default="", exclude=True)
    nutrition: NutritionInfo
    type: MealType
    date: str = Field(description="ISO-8601 UTC timestamp at creation")


@dataclass(frozen=True)
class DailyMeals:
    """Meals logged on one calendar day with their totals."""

    day: date
    meals: list[Meal]
    totals: MacroTotals
