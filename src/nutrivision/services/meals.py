"""Meal log persistence and meal construction."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from nutrivision.domain.errors import PersistenceFailureError
from nutrivision.domain.meals import Meal, MealType
from nutrivision.domain.nutrition import NutritionInfo

_logger = logging.getLogger(__name__)


class MealLogRepository(Protocol):
    """Persistence interface for the meal log."""

    def load_meals(self) -> list[Meal]:
        """Return the stored log, or an empty list when nothing is stored."""

    def save_meals(self, meals: list[Meal]) -> None:
        """Replace the stored log."""


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


@dataclass
class MealIdGenerator:
    """Time-based meal ids that never repeat within a process."""

    clock: Callable[[], int] = _epoch_millis
    _last: int = 0

    def __call__(self) -> int:
        candidate = self.clock()
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate

    def observe(self, existing_id: int) -> None:
        """Make later ids sort after an id already in the log."""
        self._last = max(self._last, existing_id)


@dataclass
class MealLogService:
    """Loads and saves the meal log; storage errors never escape."""

    repository: MealLogRepository
    next_id: MealIdGenerator = field(default_factory=MealIdGenerator)

    def load(self) -> list[Meal]:
        """Return the persisted log, falling back to an empty one."""
        try:
            meals = self.repository.load_meals()
        except PersistenceFailureError:
            _logger.exception("Could not load meals from storage")
            return []
        if meals:
            self.next_id.observe(max(meal.id for meal in meals))
        return meals

    def save(self, meals: list[Meal]) -> None:
        """Persist the whole log."""
        try:
            self.repository.save_meals(meals)
        except PersistenceFailureError:
            _logger.exception("Could not save meals to storage")

    def create_meal(  # noqa: PLR0913
        self,
        *,
        name: str,
        description: str,
        nutrition: NutritionInfo,
        meal_type: MealType,
        image_url: str = "",
        meal_id: int | None = None,
    ) -> Meal:
        """Build a new meal stamped with an id and the current UTC time."""
        return Meal(
            id=meal_id if meal_id is not None else self.next_id(),
            name=name,
            description=description,
            image_url=image_url,
            nutrition=nutrition,
            type=meal_type,
            date=datetime.now(tz=UTC).isoformat(),
        )
