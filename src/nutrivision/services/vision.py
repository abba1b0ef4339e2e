"""Food identification from meal photos."""

import base64
from dataclasses import dataclass

from nutrivision.domain.vision import (
    UNCERTAIN_TITLE,
    ConfidentIdentification,
    FoodIdentification,
    Identification,
    UncertainIdentification,
    UploadedImage,
)
from nutrivision.services.llm import ModelClient, parse_model_output

IDENTIFICATION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "title": {
            "type": "string",
            "description": (
                "A short, concise title for the entire meal "
                "(e.g., 'Indian Thali with Dal and Okra')."
            ),
        },
        "description": {
            "type": "string",
            "description": (
                "A detailed breakdown of the identified food items, formatted as "
                "a markdown list starting with asterisks "
                "(e.g., '* **Dahi (Yogurt):** A small bowl of plain yogurt.')."
            ),
        },
    },
    "required": ["title", "description"],
    "additionalProperties": False,
}

IDENTIFICATION_PROMPT = f"""
Analyze the food in this image with high accuracy, being specific about regional \
dishes like Indian curries.
Your response MUST be a JSON object that conforms to the provided schema.

The JSON object should have two keys: "title" and "description".
- "title": A short, descriptive name for the meal.
- "description": A markdown formatted string listing each identified component. \
Each item should start with an asterisk (*).

Example of a confident response:
{{
  "title": "Indian Thali with Roti, Dal, and Bhindi Sabzi",
  "description": "* **Roti/Chapati:** Flat Indian bread. * **Dal:** A yellow \
lentil curry. * **Bhindi Sabzi:** A stir-fry made with okra. * **Dahi:** A side \
of plain yogurt."
}}

If you are NOT confident about the main dish, the title MUST be "{UNCERTAIN_TITLE}". \
The description should then explain what you can see and why you are uncertain.
Example of an uncertain response:
{{
  "title": "{UNCERTAIN_TITLE}",
  "description": "I can identify rice and what appears to be a form of flatbread, \
but I am not sure about the specific type of curry. It seems to be a thick, \
orange-colored gravy but its main ingredients are not visually clear."
}}
"""


@dataclass
class IdentificationService:
    """Service that asks the vision model to name the meal in a photo."""

    client: ModelClient

    async def identify(self, image: UploadedImage) -> Identification:
        """Identify the meal in an image and tag the result by confidence."""
        raw = await self.client.generate_json(
            prompt=IDENTIFICATION_PROMPT,
            schema=IDENTIFICATION_SCHEMA,
            schema_name="food_identification",
            image_data_url=_to_data_url(image.content, image.mime_type),
        )
        result = parse_model_output(
            raw, FoodIdentification, what="food identification"
        )
        return classify(result)


def classify(result: FoodIdentification) -> Identification:
    """Tag a raw identification; the sentinel title marks low confidence."""
    if is_uncertain_title(result.title):
        return UncertainIdentification(description=result.description)
    return ConfidentIdentification(title=result.title, description=result.description)


def is_uncertain_title(title: str) -> bool:
    """Return True when the model reported the uncertainty sentinel."""
    return "uncertain" in title.lower()


def _to_data_url(image_bytes: bytes, mime_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    resolved = mime_type or detect_mime_type(image_bytes) or "image/jpeg"
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{resolved};base64,{encoded}"


def detect_mime_type(image_bytes: bytes) -> str | None:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return None
