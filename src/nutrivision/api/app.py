"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import (
    FastAPI,
    File,
    Form,
    HTTPException,
    Request,
    Response,
    UploadFile,
    status,
)

from nutrivision.api.models import FoodNameConfirmation, MealTypeSelection
from nutrivision.app_logging import configure_logging
from nutrivision.containers import AppContainer
from nutrivision.domain.errors import (
    AnalysisFailedError,
    AnalysisInProgressError,
    NothingPendingError,
    ValidationFailureError,
)
from nutrivision.domain.meals import Meal, MealType
from nutrivision.domain.profile import UserProfile
from nutrivision.domain.sessions import PendingDisambiguation
from nutrivision.domain.vision import UploadedImage
from nutrivision.services.advice import total_intake
from nutrivision.services.metrics import bmi_category
from nutrivision.services.sessions import SessionService
from nutrivision.services.stats import group_by_day, macro_split
from nutrivision.services.text_cleanup import split_components
from nutrivision.services.vision import detect_mime_type

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png"}
CLEAR_CONFIRMATION_MESSAGE = (
    "Are you sure you want to clear your entire meal history? "
    "This action cannot be undone. Repeat the request with confirm=true."
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.container.session_service.refresh_advice():
            logger.info("Advice scheduled for restored session")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the profile with its derived metrics."""
        return _profile_payload(_session(request))

    @app.put("/profile")
    async def put_profile(profile: UserProfile, request: Request) -> dict[str, object]:
        """Replace the profile."""
        session = _session(request)
        session.update_profile(profile)
        return _profile_payload(session)

    @app.delete("/profile")
    async def delete_profile(request: Request) -> dict[str, str]:
        """Remove the profile and its stored record."""
        _session(request).clear_profile()
        return {"status": "deleted"}

    @app.post("/meals/analyze", status_code=status.HTTP_201_CREATED)
    async def analyze_meal(
        request: Request,
        response: Response,
        image: UploadFile = File(...),
        meal_type: MealType | None = Form(default=None),
    ) -> dict[str, object]:
        """Identify a meal photo and log it, or ask for the food name."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_service
        if session.state.profile is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Please fill out your profile to get started.",
            )
        uploaded = await _read_upload(image, state_container.settings.max_upload_bytes)
        try:
            outcome = await session.analyze_image(uploaded, meal_type)
        except AnalysisInProgressError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        except AnalysisFailedError as exc:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message
            ) from exc
        if outcome.pending is not None:
            response.status_code = status.HTTP_202_ACCEPTED
            return {
                "status": "awaiting_confirmation",
                "pending": _pending_payload(outcome.pending),
            }
        return {"status": "analyzed", "meal": _meal_payload(outcome.meal)}

    @app.post("/meals/confirm", status_code=status.HTTP_201_CREATED)
    async def confirm_food_name(
        body: FoodNameConfirmation, request: Request
    ) -> dict[str, object]:
        """Log the pending meal under the name the user confirmed."""
        session = _session(request)
        try:
            meal = await session.confirm_food_name(body.name)
        except ValidationFailureError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except (NothingPendingError, AnalysisInProgressError) as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        except AnalysisFailedError as exc:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message
            ) from exc
        return {"status": "analyzed", "meal": _meal_payload(meal)}

    @app.post("/meals/cancel")
    async def cancel_confirmation(request: Request) -> dict[str, object]:
        """Discard the pending meal."""
        cancelled = _session(request).cancel_disambiguation()
        return {"status": "cancelled", "discarded": cancelled}

    @app.get("/meals")
    async def list_meals(request: Request) -> dict[str, object]:
        """Return the meal log in insertion order with whole-log totals."""
        meals = _session(request).state.meals
        return {
            "meals": [_meal_payload(meal) for meal in meals],
            "totals": _totals_payload(meals),
        }

    @app.get("/meals/history")
    async def meal_history(request: Request) -> dict[str, object]:
        """Return meals grouped by day, newest first."""
        days = group_by_day(_session(request).state.meals)
        return {
            "days": [
                {
                    "day": day.day.isoformat(),
                    "meals": [_meal_payload(meal) for meal in day.meals],
                    "totals": _totals_payload(day.meals),
                }
                for day in days
            ]
        }

    @app.get("/meals/{meal_id}/image")
    async def meal_image(meal_id: int, request: Request) -> Response:
        """Serve an uploaded photo while this process still holds it."""
        image = _session(request).image_store.get(meal_id)
        if image is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return Response(content=image.content, media_type=image.mime_type)

    @app.delete("/meals")
    async def clear_meals(request: Request, confirm: bool = False) -> dict[str, str]:
        """Clear the entire meal history."""
        if not confirm:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=CLEAR_CONFIRMATION_MESSAGE,
            )
        _session(request).clear_history()
        logger.info("Meal history cleared via API")
        return {"status": "cleared"}

    @app.get("/session")
    async def session_state(request: Request) -> dict[str, object]:
        """Return the in-flight flag, error banner and pending item."""
        session = _session(request)
        state = session.state
        return {
            "is_analyzing": state.is_analyzing,
            "error": state.error,
            "selected_meal_type": state.selected_meal_type.value,
            "pending": (
                _pending_payload(session.pending) if session.pending else None
            ),
            "current_analysis": (
                _meal_payload(state.current_analysis)
                if state.current_analysis
                else None
            ),
        }

    @app.put("/session/meal-type")
    async def select_meal_type(
        body: MealTypeSelection, request: Request
    ) -> dict[str, str]:
        """Set the meal type used by uploads that do not name one."""
        _session(request).select_meal_type(body.meal_type)
        return {"selected_meal_type": body.meal_type.value}

    @app.get("/advice")
    async def advice(request: Request) -> dict[str, object]:
        """Return the latest advice."""
        scheduler = request.app.state.container.advice_scheduler
        return {"advice": scheduler.advice, "is_fetching": scheduler.is_fetching}

    return app


def _session(request: Request) -> SessionService:
    state_container: AppContainer = request.app.state.container
    return state_container.session_service


async def _read_upload(image: UploadFile, max_bytes: int) -> UploadedImage:
    """Validate type and size of an uploaded photo and read it."""
    if image.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Invalid file type. Please upload a JPG, JPEG, or PNG image.",
        )
    content = await image.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=(
                f"File is too large. Maximum size is {max_bytes // 1024 // 1024}MB."
            ),
        )
    detected = detect_mime_type(content)
    if detected not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Invalid file type. Please upload a JPG, JPEG, or PNG image.",
        )
    return UploadedImage(content=content, mime_type=detected, filename=image.filename)


def _profile_payload(session: SessionService) -> dict[str, object]:
    profile = session.state.profile
    calculations = session.calculations
    return {
        "profile": profile.model_dump(mode="json") if profile else None,
        "calculations": (
            {
                "bmi": calculations.bmi,
                "bmr": calculations.bmr,
                "tdee": calculations.tdee,
                "bmi_category": bmi_category(calculations.bmi),
            }
            if calculations
            else None
        ),
    }


def _meal_payload(meal: Meal) -> dict[str, object]:
    payload = meal.model_dump(mode="json")
    payload["image_url"] = meal.image_url or None
    payload["components"] = split_components(meal.description)
    payload["macro_split"] = macro_split(meal.nutrition)
    return payload


def _pending_payload(pending: PendingDisambiguation) -> dict[str, object]:
    return {
        "ai_description": pending.ai_description,
        "suggested_name": pending.suggested_name,
        "meal_type": pending.meal_type.value,
    }


def _totals_payload(meals: list[Meal]) -> dict[str, float]:
    totals = total_intake(meals)
    return {
        "calories": totals.calories,
        "protein_g": totals.protein_g,
        "carbs_g": totals.carbs_g,
        "fat_g": totals.fat_g,
    }
