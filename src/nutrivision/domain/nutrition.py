"""Nutrition domain models."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


class Nutrient(BaseModel):
    """Single vitamin or mineral amount."""

    model_config = ConfigDict(frozen=True)

    name: str
    amount: float
    unit: str


class Carbohydrates(BaseModel):
    """Carbohydrate breakdown in grams."""

    model_config = ConfigDict(frozen=True)

    total: float
    fiber: float
    sugar: float


class Fat(BaseModel):
    """Fat breakdown in grams."""

    model_config = ConfigDict(frozen=True)

    total: float
    saturated: float


class NutritionInfo(BaseModel):
    """Aggregate nutrition estimate for a standard serving of a meal."""

    model_config = ConfigDict(frozen=True)

    calories: float
    protein: float
    carbohydrates: Carbohydrates
    fat: Fat
    vitamins: list[Nutrient]
    minerals: list[Nutrient]


@dataclass(frozen=True)
class MacroTotals:
    """Summed calories and macronutrients."""

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
