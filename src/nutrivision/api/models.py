"""Pydantic models for API request bodies."""

from pydantic import BaseModel

from nutrivision.domain.meals import MealType


class FoodNameConfirmation(BaseModel):
    """User-supplied name for a food the model was unsure about."""

    name: str


class MealTypeSelection(BaseModel):
    """Meal slot used by uploads that do not name one."""

    meal_type: MealType
