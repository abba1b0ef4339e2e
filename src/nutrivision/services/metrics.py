"""BMI, BMR and TDEE calculations."""

from nutrivision.domain.profile import (
    ActivityLevel,
    Gender,
    Goal,
    UserCalculations,
    UserProfile,
)

ACTIVITY_LEVEL_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.SUPER_ACTIVE: 1.9,
}

GOAL_ADJUSTMENTS: dict[Goal, float] = {
    Goal.LOSE_WEIGHT: -500.0,
    Goal.MAINTAIN_WEIGHT: 0.0,
    Goal.GAIN_WEIGHT: 500.0,
}

_BMI_CATEGORIES: list[tuple[float, str]] = [
    (18.5, "Underweight"),
    (24.9, "Normal"),
    (29.9, "Overweight"),
]


def compute_metrics(profile: UserProfile | None) -> UserCalculations | None:
    """Return BMI, BMR and goal-adjusted TDEE, or None for an incomplete profile.

    BMR uses the Mifflin-St Jeor equation. The returned ``tdee`` already
    includes the goal adjustment; it is the daily calorie target.
    """
    if profile is None:
        return None
    weight, height, age = profile.weight, profile.height, profile.age
    if not weight or not height or not age:
        return None

    height_m = height / 100
    bmi = round(weight / (height_m * height_m), 2)

    bmr = 10 * weight + 6.25 * height - 5 * age
    bmr += 5 if profile.gender == Gender.MALE else -161
    bmr = round(bmr, 2)

    tdee = round(bmr * ACTIVITY_LEVEL_MULTIPLIERS[profile.activity_level], 2)
    goal_adjusted = tdee + GOAL_ADJUSTMENTS.get(profile.goal, 0.0)
    return UserCalculations(bmi=bmi, bmr=bmr, tdee=goal_adjusted)


def bmi_category(bmi: float) -> str:
    """Return the display category for a BMI value."""
    for upper_bound, label in _BMI_CATEGORIES:
        if bmi < upper_bound:
            return label
    return "Obese"
