"""Coaching advice generation with debounced scheduling."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from nutrivision.domain.meals import Meal
from nutrivision.domain.nutrition import MacroTotals
from nutrivision.domain.profile import UserCalculations, UserProfile
from nutrivision.services.llm import ModelClient

NO_CALCULATIONS_MESSAGE = "Cannot generate advice without user profile calculations."

_logger = logging.getLogger(__name__)


@dataclass
class AdviceService:
    """Builds the coaching prompt and asks the model for advice."""

    client: ModelClient

    async def generate_advice(
        self,
        profile: UserProfile,
        meals: Sequence[Meal],
        calculations: UserCalculations | None,
    ) -> str:
        """Return advice text for the whole meal log."""
        if calculations is None:
            return NO_CALCULATIONS_MESSAGE
        prompt = build_advice_prompt(profile, meals, calculations)
        return await self.client.generate_text(prompt=prompt)


def total_intake(meals: Sequence[Meal]) -> MacroTotals:
    """Sum calories and macros across every meal in the log."""
    total = MacroTotals()
    for meal in meals:
        nutrition = meal.nutrition
        total = MacroTotals(
            calories=total.calories + nutrition.calories,
            protein_g=total.protein_g + nutrition.protein,
            carbs_g=total.carbs_g + nutrition.carbohydrates.total,
            fat_g=total.fat_g + nutrition.fat.total,
        )
    return total


def build_advice_prompt(
    profile: UserProfile, meals: Sequence[Meal], calculations: UserCalculations
) -> str:
    """Embed the profile, calorie target and intake totals in the prompt."""
    totals = total_intake(meals)
    meal_list = ", ".join(f"{meal.name} ({meal.type.value})" for meal in meals)
    return f"""
Based on the following user profile and their daily food intake, provide \
actionable, encouraging, and concise advice.

**User Profile:**
- Age: {profile.age}
- Gender: {profile.gender.value}
- Goal: {profile.goal.value}
- Daily Calorie Target: {calculations.tdee:.0f} kcal

**Today's Food Intake:**
- Meals: {meal_list}
- Total Calories Consumed: {totals.calories:.0f} kcal
- Total Protein: {totals.protein_g:.1f} g
- Total Carbohydrates: {totals.carbs_g:.1f} g
- Total Fat: {totals.fat_g:.1f} g

**Task:**
1. Briefly comment on the user's progress towards their daily calorie goal.
2. Analyze the macronutrient balance. Is it aligned with their goal (e.g., higher \
protein for muscle gain, balanced for maintenance)?
3. Provide 1-2 simple, actionable suggestions for their next meal or for tomorrow. \
For example, if protein is low, suggest a protein source. If they are over their \
calorie limit, suggest a lighter meal option.
4. Keep the tone positive and motivational. Address the user directly. Use markdown \
for formatting, for example **bold** for emphasis.
"""


@dataclass
class AdviceScheduler:
    """Debounces advice generation and drops results from superseded requests.

    ``schedule`` replaces any timer that has not fired yet. Each request gets a
    generation number; a completed request only updates ``advice`` when no newer
    request has been scheduled since. Generation failures are logged and leave
    the previous advice in place.
    """

    service: AdviceService
    delay_seconds: float = 1.0
    advice: str = ""
    is_fetching: bool = False
    _generation: int = 0
    _timer: asyncio.TimerHandle | None = None
    _in_flight: set[asyncio.Task[None]] = field(default_factory=set)

    def schedule(
        self,
        profile: UserProfile | None,
        meals: Sequence[Meal],
        calculations: UserCalculations | None,
    ) -> bool:
        """Schedule a generation after the settling delay.

        Returns False without scheduling when there is no profile, no meals
        or no running event loop.
        """
        if profile is None or not meals:
            return False
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _logger.debug("No running event loop, advice not scheduled")
            return False
        self._cancel_timer()
        self._generation += 1
        generation = self._generation
        snapshot = list(meals)
        self._timer = loop.call_later(
            self.delay_seconds,
            self._fire,
            generation,
            profile,
            snapshot,
            calculations,
        )
        return True

    def reset(self) -> None:
        """Forget current advice and ignore anything still pending."""
        self._cancel_timer()
        self._generation += 1
        self.advice = ""
        self.is_fetching = False

    async def drain(self) -> None:
        """Wait for in-flight generations to settle."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel the pending timer and wait for in-flight work."""
        self._cancel_timer()
        await self.drain()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(
        self,
        generation: int,
        profile: UserProfile,
        meals: list[Meal],
        calculations: UserCalculations | None,
    ) -> None:
        self._timer = None
        if generation != self._generation:
            return
        task = asyncio.get_running_loop().create_task(
            self._generate(generation, profile, meals, calculations)
        )
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _generate(
        self,
        generation: int,
        profile: UserProfile,
        meals: list[Meal],
        calculations: UserCalculations | None,
    ) -> None:
        self.is_fetching = True
        try:
            advice = await self.service.generate_advice(profile, meals, calculations)
        except Exception:
            _logger.exception("Failed to generate advice")
            return
        finally:
            if generation == self._generation:
                self.is_fetching = False
        if generation != self._generation:
            _logger.info("Discarding advice from superseded request %s", generation)
            return
        self.advice = advice
