"""Shared test fixtures."""

import json
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from nutrivision.config import Settings
from nutrivision.containers import AppContainer
from nutrivision.domain.errors import PersistenceFailureError
from nutrivision.domain.meals import Meal, MealType
from nutrivision.domain.nutrition import NutritionInfo
from nutrivision.domain.profile import ActivityLevel, Gender, Goal, UserProfile
from nutrivision.domain.vision import UNCERTAIN_TITLE, UploadedImage
from nutrivision.services.advice import AdviceScheduler, AdviceService
from nutrivision.services.cache import InMemoryCache
from nutrivision.services.llm import ModelClient
from nutrivision.services.meals import MealLogRepository, MealLogService
from nutrivision.services.nutrition import NutritionService
from nutrivision.services.profiles import ProfileRepository, ProfileService
from nutrivision.services.sessions import SessionService
from nutrivision.services.vision import IdentificationService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32


@dataclass
class FakeModelClient(ModelClient):
    """Fake model client replaying queued responses in order.

    A queued exception is raised instead of returned.
    """

    json_responses: list[str | Exception] = field(default_factory=list)
    text_responses: list[str | Exception] = field(default_factory=list)
    json_calls: list[dict[str, object]] = field(default_factory=list)
    text_calls: list[str] = field(default_factory=list)

    async def generate_json(
        self,
        *,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None = None,
    ) -> str:
        self.json_calls.append(
            {
                "prompt": prompt,
                "schema_name": schema_name,
                "image_data_url": image_data_url,
            }
        )
        return _next(self.json_responses)

    async def generate_text(self, *, prompt: str) -> str:
        self.text_calls.append(prompt)
        return _next(self.text_responses)


def _next(queue: list[str | Exception]) -> str:
    response = queue.pop(0)
    if isinstance(response, Exception):
        raise response
    return response


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profile: UserProfile | None = None
    saves: int = 0
    fail: bool = False

    def load_profile(self) -> UserProfile | None:
        if self.fail:
            raise PersistenceFailureError("disk on fire")
        return self.profile

    def save_profile(self, profile: UserProfile | None) -> None:
        if self.fail:
            raise PersistenceFailureError("disk on fire")
        self.saves += 1
        self.profile = profile


@dataclass
class InMemoryMealLogRepository(MealLogRepository):
    """In-memory meal log repository for tests."""

    meals: list[Meal] = field(default_factory=list)
    saves: int = 0
    fail: bool = False

    def load_meals(self) -> list[Meal]:
        if self.fail:
            raise PersistenceFailureError("disk on fire")
        return list(self.meals)

    def save_meals(self, meals: list[Meal]) -> None:
        if self.fail:
            raise PersistenceFailureError("disk on fire")
        self.saves += 1
        self.meals = list(meals)


def make_profile(**overrides: object) -> UserProfile:
    values: dict[str, object] = {
        "age": 25,
        "gender": Gender.MALE,
        "weight": 70,
        "height": 175,
        "activity_level": ActivityLevel.SEDENTARY,
        "goal": Goal.LOSE_WEIGHT,
    }
    values.update(overrides)
    return UserProfile.model_validate(values)


def nutrition_payload(
    calories: float = 500,
    protein: float = 25,
    carbs: float = 60,
    fat: float = 15,
) -> dict[str, object]:
    return {
        "calories": calories,
        "protein": protein,
        "carbohydrates": {"total": carbs, "fiber": 8, "sugar": 6},
        "fat": {"total": fat, "saturated": 4},
        "vitamins": [{"name": "Vitamin C", "amount": 12, "unit": "mg"}],
        "minerals": [{"name": "Iron", "amount": 3.5, "unit": "mg"}],
    }


def nutrition_json(**kwargs: float) -> str:
    return json.dumps(nutrition_payload(**kwargs))


def identification_json(title: str, description: str) -> str:
    return json.dumps({"title": title, "description": description})


def uncertain_json(
    description: str = "I see rice, and what looks like a curry.",
) -> str:
    return identification_json(UNCERTAIN_TITLE, description)


def make_nutrition(**kwargs: float) -> NutritionInfo:
    return NutritionInfo.model_validate(nutrition_payload(**kwargs))


def make_meal(  # noqa: PLR0913
    meal_id: int = 1,
    name: str = "Dal Rice",
    date: str = "2026-03-01T12:30:00+00:00",
    meal_type: MealType = MealType.LUNCH,
    image_url: str = "",
    **nutrition: float,
) -> Meal:
    return Meal(
        id=meal_id,
        name=name,
        description="* **Dal:** Lentil curry. * **Rice:** Steamed rice.",
        image_url=image_url,
        nutrition=make_nutrition(**nutrition),
        type=meal_type,
        date=date,
    )


def png_image() -> UploadedImage:
    return UploadedImage(content=PNG_BYTES, mime_type="image/png", filename="meal.png")


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        data_dir=tmp_path,
        advice_debounce_seconds=60.0,
        environment="test",
    )


@pytest.fixture
def model_client() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def meal_repository() -> InMemoryMealLogRepository:
    return InMemoryMealLogRepository()


@pytest.fixture
def advice_scheduler(model_client: FakeModelClient) -> AdviceScheduler:
    return AdviceScheduler(service=AdviceService(model_client), delay_seconds=60.0)


@pytest.fixture
def session_service(
    model_client: FakeModelClient,
    profile_repository: InMemoryProfileRepository,
    meal_repository: InMemoryMealLogRepository,
    advice_scheduler: AdviceScheduler,
) -> SessionService:
    return SessionService(
        identification_service=IdentificationService(model_client),
        nutrition_service=NutritionService(client=model_client, cache=InMemoryCache()),
        meal_log_service=MealLogService(meal_repository),
        profile_service=ProfileService(profile_repository),
        advice_scheduler=advice_scheduler,
    )


@pytest.fixture
def container(
    settings: Settings,
    session_service: SessionService,
    advice_scheduler: AdviceScheduler,
) -> AppContainer:
    async def close_resources() -> None:
        await advice_scheduler.aclose()

    return AppContainer(
        settings=settings,
        session_service=session_service,
        advice_scheduler=advice_scheduler,
        close_resources=close_resources,
    )
