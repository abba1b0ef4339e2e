"""Models for food identification results."""

from dataclasses import dataclass

from pydantic import BaseModel

UNCERTAIN_TITLE = "Uncertain Food"


class FoodIdentification(BaseModel):
    """Structured output returned by the vision model."""

    title: str
    description: str


@dataclass(frozen=True)
class ConfidentIdentification:
    """The model named the meal."""

    title: str
    description: str


@dataclass(frozen=True)
class UncertainIdentification:
    """The model could not name the meal and explained why."""

    description: str


Identification = ConfidentIdentification | UncertainIdentification


@dataclass(frozen=True)
class UploadedImage:
    """Raw image handle carried through one meal analysis."""

    content: bytes
    mime_type: str
    filename: str | None = None
