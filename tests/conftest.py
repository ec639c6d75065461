"""Shared test fixtures."""

import base64
import io
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
from PIL import Image

from calorie_tracker.config import Settings
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.errors import AnalysisError
from calorie_tracker.services.analysis import AnalysisClient, AnalysisService
from calorie_tracker.services.grocery import GroceryMentor
from calorie_tracker.services.meal_flow import MealLogger
from calorie_tracker.services.session import SessionController, StateStore


@dataclass
class InMemoryStateStore(StateStore):
    """In-memory state store for tests."""

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def delete(self, key: str) -> None:
        self.values.pop(key, None)


def _default_payloads() -> dict[str, dict[str, object]]:
    return {
        "meal_analysis": {
            "dishName": "Chicken curry",
            "estimatedNutrition": {
                "calories": 520,
                "protein": 32,
                "carbohydrates": 45,
                "fat": 22,
                "portionSize": "1 medium bowl",
            },
            "clarifyingQuestions": [
                {
                    "question": "How was the chicken prepared?",
                    "options": ["Deep-fried", "Pan-fried", "Baked"],
                }
            ],
        },
        "meal_nutrition": {
            "calories": 610,
            "protein": 32,
            "carbohydrates": 45,
            "fat": 31.5,
            "portionSize": "1 medium bowl",
        },
        "grocery_analysis": {
            "itemName": "Choco crunch cereal",
            "healthMentorSummary": "Tasty, but mostly sugar. Keep it occasional.",
            "ingredients": [
                {
                    "name": "Whole grain oats",
                    "healthImpact": "good",
                    "explanation": "Adds fiber.",
                },
                {
                    "name": "Sugar",
                    "healthImpact": "bad",
                    "explanation": "Second ingredient by weight.",
                },
            ],
            "healthyAlternatives": ["Plain oats with fruit", "Unsweetened muesli"],
        },
    }


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Fake analysis client returning fixed payloads per schema."""

    payloads: dict[str, dict[str, object]] = field(default_factory=_default_payloads)
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

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
        self.calls.append(
            {
                "schema_name": schema_name,
                "prompt": prompt,
                "image_data_url": image_data_url,
            }
        )
        if self.error is not None:
            raise self.error
        return self.payloads[schema_name]


def make_image_bytes(fmt: str = "PNG", mode: str = "RGBA") -> bytes:
    """Render a tiny image in the requested format."""
    color = (200, 40, 40, 128) if mode == "RGBA" else (200, 40, 40)
    output = io.BytesIO()
    Image.new(mode, (8, 8), color).save(output, format=fmt)
    return output.getvalue()


def make_data_url(fmt: str = "PNG", mode: str = "RGBA") -> str:
    encoded = base64.b64encode(make_image_bytes(fmt, mode)).decode()
    return f"data:image/{fmt.lower()};base64,{encoded}"


def analysis_service(client: FakeAnalysisClient) -> AnalysisService:
    return AnalysisService(
        client=client,
        model="gpt-5.2",
        reasoning_effort="low",
        store=False,
    )


def gateway_error() -> AnalysisError:
    return AnalysisError("OpenAI request failed: connection reset")


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        state_path=tmp_path / "state.json",
        environment="test",
    )


@pytest.fixture
def state_store() -> InMemoryStateStore:
    return InMemoryStateStore()


@pytest.fixture
def analysis_client() -> FakeAnalysisClient:
    return FakeAnalysisClient()


@pytest.fixture
def container(
    settings: Settings,
    state_store: InMemoryStateStore,
    analysis_client: FakeAnalysisClient,
) -> AppContainer:
    service = analysis_service(analysis_client)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        timezone=ZoneInfo(settings.timezone),
        session_controller=SessionController(state_store),
        analysis_service=service,
        meal_logger=MealLogger(analysis_service=service),
        grocery_mentor=GroceryMentor(analysis_service=service),
        close_resources=close_resources,
    )
