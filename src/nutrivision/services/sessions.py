"""Session orchestration for photo-based meal logging."""

import logging
from dataclasses import dataclass, field
from typing import NoReturn

from nutrivision.domain.errors import (
    AnalysisFailedError,
    AnalysisInProgressError,
    MalformedAIResponseError,
    ServiceFailureError,
)
from nutrivision.domain.meals import Meal, MealType
from nutrivision.domain.profile import UserCalculations, UserProfile
from nutrivision.domain.sessions import PendingDisambiguation, SessionState
from nutrivision.domain.vision import UploadedImage
from nutrivision.services.advice import AdviceScheduler
from nutrivision.services.disambiguation import ConfirmedFood, DisambiguationGate
from nutrivision.services.images import TransientImageStore
from nutrivision.services.meals import MealLogService
from nutrivision.services.nutrition import NutritionService
from nutrivision.services.profiles import ProfileService
from nutrivision.services.vision import IdentificationService

IDENTIFY_FAILED_MESSAGE = (
    "Failed to identify the food from the image. Please try again."
)
NUTRITION_FAILED_MESSAGE = (
    "Failed to get nutritional info. Please try again with a clearer name."
)

_STAGE_MESSAGES = {
    "identify": IDENTIFY_FAILED_MESSAGE,
    "nutrition": NUTRITION_FAILED_MESSAGE,
}

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result of an upload: a logged meal or a pending confirmation."""

    meal: Meal | None = None
    pending: PendingDisambiguation | None = None


@dataclass
class SessionService:
    """Owns the session state and runs identify -> confirm -> lookup -> append.

    Every mutation of the profile or meal log is saved immediately and
    reschedules advice. A failed stage resets the analyzing flag, sets a
    single error banner and never appends a meal.
    """

    identification_service: IdentificationService
    nutrition_service: NutritionService
    meal_log_service: MealLogService
    profile_service: ProfileService
    advice_scheduler: AdviceScheduler
    image_store: TransientImageStore = field(default_factory=TransientImageStore)
    gate: DisambiguationGate = field(default_factory=DisambiguationGate)
    state: SessionState = field(default_factory=SessionState)
    debug_errors: bool = False

    def restore(self) -> None:
        """Load the persisted profile and meal log into the session."""
        self.state.profile = self.profile_service.load()
        self.state.meals = self.meal_log_service.load()
        _logger.info(
            "Session restored: profile=%s meals=%s",
            self.state.profile is not None,
            len(self.state.meals),
        )

    @property
    def calculations(self) -> UserCalculations | None:
        """Metrics for the current profile."""
        return self.profile_service.calculations(self.state.profile)

    @property
    def pending(self) -> PendingDisambiguation | None:
        """The uncertain identification awaiting a name, if any."""
        return self.gate.pending

    def update_profile(self, profile: UserProfile) -> UserCalculations | None:
        """Replace the profile, save it and refresh advice."""
        self.state.profile = profile
        self.profile_service.save(profile)
        self.refresh_advice()
        return self.calculations

    def clear_profile(self) -> None:
        """Remove the profile and its stored record."""
        self.state.profile = None
        self.profile_service.save(None)
        self.advice_scheduler.reset()

    def select_meal_type(self, meal_type: MealType) -> None:
        self.state.selected_meal_type = meal_type

    async def analyze_image(
        self, image: UploadedImage, meal_type: MealType | None = None
    ) -> AnalysisOutcome:
        """Identify a photo, then either log the meal or wait for a name."""
        if self.state.is_analyzing or self.gate.is_awaiting:
            raise AnalysisInProgressError("An analysis is already in progress.")
        if meal_type is not None:
            self.state.selected_meal_type = meal_type
        self._begin()
        try:
            try:
                identification = await self.identification_service.identify(image)
            except (MalformedAIResponseError, ServiceFailureError) as exc:
                self._fail("identify", exc)
            food = self.gate.route(
                identification, image, self.state.selected_meal_type
            )
            if food is None:
                _logger.info("Identification uncertain, awaiting food name")
                return AnalysisOutcome(pending=self.gate.pending)
            meal = await self._process_food(food, reopen_on_failure=False)
            return AnalysisOutcome(meal=meal)
        finally:
            self.state.is_analyzing = False

    async def confirm_food_name(self, name: str) -> Meal:
        """Look up nutrition for a user-confirmed name and log the meal."""
        if self.state.is_analyzing:
            raise AnalysisInProgressError("An analysis is already in progress.")
        food = self.gate.confirm(name)
        self._begin()
        try:
            return await self._process_food(food, reopen_on_failure=True)
        finally:
            self.state.is_analyzing = False

    def cancel_disambiguation(self) -> bool:
        """Drop the pending item and the error banner."""
        self.state.error = None
        cancelled = self.gate.cancel()
        self.gate.settle()
        return cancelled

    def clear_history(self) -> None:
        """Delete every meal. This is the only way meals are removed."""
        self.gate.cancel()
        self.gate.settle()
        self.state.meals = []
        self.state.current_analysis = None
        self.state.error = None
        self.meal_log_service.save(self.state.meals)
        self.image_store.clear()
        self.advice_scheduler.reset()
        _logger.info("Meal history cleared")

    def _begin(self) -> None:
        self.state.is_analyzing = True
        self.state.error = None
        self.state.current_analysis = None

    async def _process_food(
        self, food: ConfirmedFood, *, reopen_on_failure: bool
    ) -> Meal:
        try:
            nutrition = await self.nutrition_service.lookup(food.name)
        except (MalformedAIResponseError, ServiceFailureError) as exc:
            if reopen_on_failure:
                self.gate.reopen(food)
            self._fail("nutrition", exc)

        meal_id = self.meal_log_service.next_id()
        meal = self.meal_log_service.create_meal(
            meal_id=meal_id,
            name=food.name,
            description=food.description,
            nutrition=nutrition,
            meal_type=food.meal_type,
            image_url=self.image_store.put(meal_id, food.image),
        )
        self.state.meals = [*self.state.meals, meal]
        self.gate.settle()
        self.state.current_analysis = meal
        self.meal_log_service.save(self.state.meals)
        _logger.info("Meal logged: id=%s name=%s", meal.id, meal.name)
        self.refresh_advice()
        return meal

    def _fail(self, stage: str, exc: Exception) -> NoReturn:
        message = _STAGE_MESSAGES[stage]
        if self.debug_errors:
            message = f"{message} (debug: {type(exc).__name__}: {exc})"
        self.state.error = message
        self.state.is_analyzing = False
        _logger.exception("Meal analysis failed at %s stage", stage)
        raise AnalysisFailedError(message, stage=stage) from exc

    def refresh_advice(self) -> bool:
        """Schedule advice for the current profile and log.

        Returns False when nothing was scheduled.
        """
        return self.advice_scheduler.schedule(
            self.state.profile, self.state.meals, self.calculations
        )
