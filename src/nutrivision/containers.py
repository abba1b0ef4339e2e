"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutrivision.adapters.local_store import (
    JsonFileStore,
    LocalMealLogRepository,
    LocalProfileRepository,
)
from nutrivision.adapters.openai_model_client import OpenAIModelClient
from nutrivision.config import Settings
from nutrivision.services.advice import AdviceScheduler, AdviceService
from nutrivision.services.cache import InMemoryCache
from nutrivision.services.images import TransientImageStore
from nutrivision.services.meals import MealLogService
from nutrivision.services.nutrition import NutritionService
from nutrivision.services.profiles import ProfileService
from nutrivision.services.sessions import SessionService
from nutrivision.services.vision import IdentificationService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_service: SessionService
    advice_scheduler: AdviceScheduler
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container with a restored session."""
    resolved_settings = settings or Settings()
    model_client = OpenAIModelClient.create(
        api_key=resolved_settings.openai_api_key,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
    )
    store = JsonFileStore(resolved_settings.data_dir)
    advice_scheduler = AdviceScheduler(
        service=AdviceService(model_client),
        delay_seconds=resolved_settings.advice_debounce_seconds,
    )
    session_service = SessionService(
        identification_service=IdentificationService(model_client),
        nutrition_service=NutritionService(
            client=model_client,
            cache=InMemoryCache(),
            ttl_seconds=resolved_settings.nutrition_cache_ttl_seconds,
            debug=resolved_settings.is_local,
        ),
        meal_log_service=MealLogService(LocalMealLogRepository(store)),
        profile_service=ProfileService(LocalProfileRepository(store)),
        advice_scheduler=advice_scheduler,
        image_store=TransientImageStore(
            capacity=resolved_settings.image_store_capacity
        ),
        debug_errors=resolved_settings.is_local,
    )
    session_service.restore()

    async def close_resources() -> None:
        await advice_scheduler.aclose()
        await model_client.close()

    return AppContainer(
        settings=resolved_settings,
        session_service=session_service,
        advice_scheduler=advice_scheduler,
        close_resources=close_resources,
    )
