"""OpenAI Responses API client for the pipeline stages."""

from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI, OpenAIError

from nutrivision.domain.errors import MalformedAIResponseError, ServiceFailureError
from nutrivision.services.llm import ModelClient


@dataclass
class OpenAIModelClient(ModelClient):
    """Model client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        api_key: str,
        model: str,
        reasoning_effort: str | None = None,
        store: bool = False,
        timeout_seconds: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> "OpenAIModelClient":
        """Create a client with a managed httpx session."""
        resolved_http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds)
        )
        return cls(
            client=AsyncOpenAI(api_key=api_key, http_client=resolved_http_client),
            model=model,
            reasoning_effort=reasoning_effort,
            store=store,
        )

    async def generate_json(
        self,
        *,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None = None,
    ) -> str:
        """Call the model with a strict JSON schema output format."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})
        request_payload = self._base_payload(content)
        request_payload["text"] = {
            "format": {
                "type": "json_schema",
                "name": schema_name,
                "strict": True,
                "schema": schema,
            }
        }
        output_text = await self._create(request_payload)
        if not output_text:
            raise MalformedAIResponseError("OpenAI returned an empty response")
        return output_text

    async def generate_text(self, *, prompt: str) -> str:
        """Call the model for a free-text answer."""
        request_payload = self._base_payload([{"type": "input_text", "text": prompt}])
        return await self._create(request_payload)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()

    def _base_payload(self, content: list[dict[str, object]]) -> dict[str, object]:
        payload: dict[str, object] = {
            "model": self.model,
            "input": [{"role": "user", "content": content}],
            "store": self.store,
        }
        if self.reasoning_effort:
            payload["reasoning"] = {"effort": self.reasoning_effort}
        return payload

    async def _create(self, request_payload: dict[str, object]) -> str:
        try:
            response = await self.client.responses.create(**request_payload)
        except (OpenAIError, httpx.HTTPError) as exc:
            raise ServiceFailureError(f"OpenAI request failed: {exc}") from exc
        return response.output_text or ""
