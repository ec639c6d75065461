"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from calorie_tracker.adapters.json_file_store import JsonFileStore
from calorie_tracker.adapters.openai_analysis_client import OpenAIAnalysisClient
from calorie_tracker.config import Settings
from calorie_tracker.services.analysis import AnalysisService
from calorie_tracker.services.grocery import GroceryMentor
from calorie_tracker.services.meal_flow import MealLogger
from calorie_tracker.services.session import SessionController


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    timezone: ZoneInfo
    session_controller: SessionController
    analysis_service: AnalysisService
    meal_logger: MealLogger
    grocery_mentor: GroceryMentor
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    session_controller = SessionController(JsonFileStore(resolved_settings.state_path))
    openai_client = OpenAIAnalysisClient.create(resolved_settings.openai_api_key)
    analysis_service = AnalysisService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    meal_logger = MealLogger(
        analysis_service=analysis_service,
        debug_errors=resolved_settings.debug_errors,
    )
    grocery_mentor = GroceryMentor(
        analysis_service=analysis_service,
        debug_errors=resolved_settings.debug_errors,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        timezone=ZoneInfo(resolved_settings.timezone),
        session_controller=session_controller,
        analysis_service=analysis_service,
        meal_logger=meal_logger,
        grocery_mentor=grocery_mentor,
        close_resources=close_resources,
    )
