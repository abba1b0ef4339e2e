"""Domain models for the analysis session."""

from dataclasses import dataclass, field
from enum import Enum

from nutrivision.domain.meals import Meal, MealType
from nutrivision.domain.profile import UserProfile
from nutrivision.domain.vision import UploadedImage


class GateState(str, Enum):
    """States of the disambiguation gate."""

    IDLE = "IDLE"
    AWAITING_CONFIRMATION = "AWAITING_CONFIRMATION"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class PendingDisambiguation:
    """An uncertain identification waiting for the user to name the food."""

    image: UploadedImage
    ai_description: str
    suggested_name: str
    meal_type: MealType


@dataclass
class SessionState:
    """Mutable state of the single active session."""

    profile: UserProfile | None = None
    meals: list[Meal] = field(default_factory=list)
    selected_meal_type: MealType = MealType.LUNCH
    is_analyzing: bool = False
    error: str | None = None
    current_analysis: Meal | None = None
