"""Generative model boundary shared by the pipeline stages."""

import json
import logging
from typing import Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from nutrivision.domain.errors import MalformedAIResponseError

_logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ModelClient(Protocol):
    """Interface for the external multimodal model."""

    async def generate_json(
        self,
        *,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None = None,
    ) -> str:
        """Return raw model text constrained to a JSON schema."""

    async def generate_text(self, *, prompt: str) -> str:
        """Return an unconstrained free-text response."""


def parse_model_output(raw: str, model: type[ModelT], *, what: str) -> ModelT:
    """Parse raw model text into ``model`` or raise MalformedAIResponseError."""
    text = raw.strip()
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        _logger.warning("Failed to parse %s JSON: %s", what, text[:500])
        raise MalformedAIResponseError(
            f"The AI returned an invalid format for {what}."
        ) from exc
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        _logger.warning("Unexpected %s payload shape: %s", what, exc)
        raise MalformedAIResponseError(
            f"The AI returned an invalid format for {what}."
        ) from exc
