"""Gate that asks the user to name food the model was unsure about."""

from dataclasses import dataclass

from nutrivision.domain.errors import (
    AnalysisInProgressError,
    NothingPendingError,
    ValidationFailureError,
)
from nutrivision.domain.meals import MealType
from nutrivision.domain.sessions import GateState, PendingDisambiguation
from nutrivision.domain.vision import (
    ConfidentIdentification,
    Identification,
    UploadedImage,
)
from nutrivision.services.text_cleanup import clean_guess


@dataclass(frozen=True)
class ConfirmedFood:
    """A food name ready for nutrition lookup."""

    name: str
    description: str
    image: UploadedImage
    meal_type: MealType


@dataclass
class DisambiguationGate:
    """State machine: IDLE -> AWAITING_CONFIRMATION -> CONFIRMED | CANCELLED.

    Holds at most one pending item. ``settle`` returns ``CONFIRMED`` and
    ``CANCELLED`` to ``IDLE`` once the caller has handled the outcome.
    """

    state: GateState = GateState.IDLE
    pending: PendingDisambiguation | None = None

    def route(
        self,
        identification: Identification,
        image: UploadedImage,
        meal_type: MealType,
    ) -> ConfirmedFood | None:
        """Pass confident results through; park uncertain ones for the user.

        Returns the food to look up, or None when confirmation is needed.
        """
        if self.pending is not None:
            raise AnalysisInProgressError("A food name confirmation is pending.")
        if isinstance(identification, ConfidentIdentification):
            self.state = GateState.IDLE
            return ConfirmedFood(
                name=identification.title,
                description=identification.description,
                image=image,
                meal_type=meal_type,
            )
        self.pending = PendingDisambiguation(
            image=image,
            ai_description=identification.description,
            suggested_name=clean_guess(identification.description),
            meal_type=meal_type,
        )
        self.state = GateState.AWAITING_CONFIRMATION
        return None

    def confirm(self, name: str) -> ConfirmedFood:
        """Accept the user's food name and release the pending item."""
        pending = self.pending
        if pending is None or self.state != GateState.AWAITING_CONFIRMATION:
            raise NothingPendingError("No food name confirmation is pending.")
        cleaned = name.strip()
        if not cleaned:
            raise ValidationFailureError("Please enter the name of the food.")
        self.pending = None
        self.state = GateState.CONFIRMED
        return ConfirmedFood(
            name=cleaned,
            description=pending.ai_description,
            image=pending.image,
            meal_type=pending.meal_type,
        )

    def reopen(self, food: ConfirmedFood) -> None:
        """Put a confirmed item back so the user can try a clearer name."""
        self.pending = PendingDisambiguation(
            image=food.image,
            ai_description=food.description,
            suggested_name=food.name,
            meal_type=food.meal_type,
        )
        self.state = GateState.AWAITING_CONFIRMATION

    def cancel(self) -> bool:
        """Discard the pending item. Returns False when nothing was pending."""
        if self.pending is None:
            return False
        self.pending = None
        self.state = GateState.CANCELLED
        return True

    def settle(self) -> None:
        """Return to IDLE once a confirmation or cancellation has been handled."""
        if self.state in (GateState.CONFIRMED, GateState.CANCELLED):
            self.state = GateState.IDLE

    @property
    def is_awaiting(self) -> bool:
        """True while a pending item waits for the user."""
        return self.state == GateState.AWAITING_CONFIRMATION
