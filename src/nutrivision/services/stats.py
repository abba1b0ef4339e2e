"""History grouping and macro breakdowns for the meal log."""

from collections.abc import Sequence
from datetime import UTC, date, datetime

from nutrivision.domain.meals import DailyMeals, Meal
from nutrivision.domain.nutrition import NutritionInfo
from nutrivision.services.advice import total_intake


def group_by_day(meals: Sequence[Meal]) -> list[DailyMeals]:
    """Group meals by UTC calendar day, newest day and newest meal first."""
    ordered = sorted(meals, key=_logged_at, reverse=True)
    grouped: dict[date, list[Meal]] = {}
    for meal in ordered:
        grouped.setdefault(_logged_at(meal).astimezone(UTC).date(), []).append(meal)
    return [
        DailyMeals(day=day, meals=day_meals, totals=total_intake(day_meals))
        for day, day_meals in grouped.items()
    ]


def macro_split(nutrition: NutritionInfo) -> dict[str, float]:
    """Return carbs, fat and protein as percentages of total macro grams.

    Returns an empty dict when every macro is zero.
    """
    values = {
        "carbs": nutrition.carbohydrates.total,
        "fat": nutrition.fat.total,
        "protein": nutrition.protein,
    }
    total = sum(values.values())
    if total <= 0:
        return {}
    return {name: round(value / total * 100, 1) for name, value in values.items()}


def _logged_at(meal: Meal) -> datetime:
    return datetime.fromisoformat(meal.date)
