"""User profile and derived metrics models."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Gender(str, Enum):
    """Biological sex used by the BMR formula."""

    MALE = "Male"
    FEMALE = "Female"


class ActivityLevel(str, Enum):
    """Ordered activity levels, least to most active."""

    SEDENTARY = "Sedentary (little or no exercise)"
    LIGHTLY_ACTIVE = "Lightly Active (light exercise/sports 1-3 days/week)"
    MODERATELY_ACTIVE = "Moderately Active (moderate exercise/sports 3-5 days/week)"
    VERY_ACTIVE = "Very Active (hard exercise/sports 6-7 days a week)"
    SUPER_ACTIVE = "Super Active (very hard exercise/physical job & exercise)"


class Goal(str, Enum):
    """Weight goal that shifts the daily calorie target."""

    LOSE_WEIGHT = "Lose Weight"
    MAINTAIN_WEIGHT = "Maintain Weight"
    GAIN_WEIGHT = "Gain Weight"


class UserProfile(BaseModel):
    """Anthropometric profile, replaced wholesale on every edit."""

    model_config = ConfigDict(frozen=True)

    age: int = Field(ge=0)
    gender: Gender
    weight: float = Field(ge=0, description="Body weight in kg")
    height: float = Field(ge=0, description="Height in cm")
    activity_level: ActivityLevel
    goal: Goal


@dataclass(frozen=True)
class UserCalculations:
    """Metrics derived from a profile."""

    bmi: float
    bmr: float
    tdee: float
