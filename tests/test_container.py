"""Tests for container wiring."""

import asyncio

from calorie_tracker.adapters.json_file_store import JsonFileStore
from calorie_tracker.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.session_controller is not None
    assert isinstance(container.session_controller.store, JsonFileStore)
    assert container.session_controller.store.path == settings.state_path
    assert container.meal_logger.analysis_service is container.analysis_service
    assert container.grocery_mentor.analysis_service is container.analysis_service
    assert container.analysis_service.model == settings.openai_model
    assert container.meal_logger.debug_errors is False
    assert str(container.timezone) == "UTC"
    asyncio.run(container.close_resources())


def test_local_environment_enables_debug_errors(settings) -> None:
    settings.environment = "local"

    container = build_container(settings)

    assert container.meal_logger.debug_errors is True
    assert container.grocery_mentor.debug_errors is True
    asyncio.run(container.close_resources())
