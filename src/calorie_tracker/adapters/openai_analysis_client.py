"""OpenAI Responses API client for structured analysis."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from calorie_tracker.domain.errors import AnalysisError
from calorie_tracker.services.analysis import AnalysisClient


@dataclass
class OpenAIAnalysisClient(AnalysisClient):
    """Analysis client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIAnalysisClient":
        """Create an OpenAI analysis client."""
        return cls(client=AsyncOpenAI(api_key=api_key, max_retries=0))

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})
        request_payload: dict[str, object] = {
            "model": model,
            "input": [{"role": "user", "content": content}],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            raise AnalysisError(f"OpenAI request failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise AnalysisError("OpenAI returned an empty response")
        try:
            parsed = json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise AnalysisError("OpenAI returned malformed JSON") from exc
        if not isinstance(parsed, dict):
            raise AnalysisError("OpenAI returned a non-object JSON value")
        return parsed

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
