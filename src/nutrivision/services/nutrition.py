"""Nutrition lookup backed by the generative model."""

import logging
from dataclasses import dataclass

from nutrivision.domain.nutrition import NutritionInfo
from nutrivision.services.cache import Cache
from nutrivision.services.llm import ModelClient, parse_model_output

_NUTRIENT_LIST_SCHEMA: dict[str, object] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "name": {"type": "string"},
            "amount": {"type": "number"},
            "unit": {"type": "string"},
        },
        "required": ["name", "amount", "unit"],
        "additionalProperties": False,
    },
}

NUTRITION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "calories": {"type": "number", "description": "Total calories in kcal."},
        "protein": {"type": "number", "description": "Total protein in grams."},
        "carbohydrates": {
            "type": "object",
            "properties": {
                "total": {
                    "type": "number",
                    "description": "Total carbohydrates in grams.",
                },
                "fiber": {"type": "number", "description": "Dietary fiber in grams."},
                "sugar": {"type": "number", "description": "Total sugar in grams."},
            },
            "required": ["total", "fiber", "sugar"],
            "additionalProperties": False,
        },
        "fat": {
            "type": "object",
            "properties": {
                "total": {"type": "number", "description": "Total fat in grams."},
                "saturated": {
                    "type": "number",
                    "description": "Saturated fat in grams.",
                },
            },
            "required": ["total", "saturated"],
            "additionalProperties": False,
        },
        "vitamins": _NUTRIENT_LIST_SCHEMA,
        "minerals": _NUTRIENT_LIST_SCHEMA,
    },
    "required": ["calories", "protein", "carbohydrates", "fat", "vitamins", "minerals"],
    "additionalProperties": False,
}

_logger = logging.getLogger(__name__)


@dataclass
class NutritionService:
    """Service for nutrition lookups with caching."""

    client: ModelClient
    cache: Cache
    ttl_seconds: int = 86400
    debug: bool = False

    async def lookup(self, food_name: str) -> NutritionInfo:
        """Return an aggregate nutrition estimate for a standard serving."""
        cache_key = f"nutrition:{' '.join(food_name.lower().split())}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, NutritionInfo):
            return cached

        raw = await self.client.generate_json(
            prompt=build_nutrition_prompt(food_name),
            schema=NUTRITION_SCHEMA,
            schema_name="nutrition_info",
        )
        info = parse_model_output(raw, NutritionInfo, what="nutritional info")
        self.cache.set(cache_key, info, ttl_seconds=self.ttl_seconds)
        if self.debug:
            _logger.info(
                "Nutrition lookup: food=%s calories=%s", food_name, info.calories
            )
        return info


def build_nutrition_prompt(food_name: str) -> str:
    """Build the lookup prompt for a possibly multi-component meal name."""
    return (
        "Provide a detailed nutritional analysis for a standard serving size of "
        f'the following meal: "{food_name}". This name may represent a meal with '
        "multiple components; provide an aggregate nutritional breakdown."
    )
