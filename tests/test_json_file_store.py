"""Tests for the JSON file state store."""

from pathlib import Path

from calorie_tracker.adapters.json_file_store import JsonFileStore
from calorie_tracker.domain.models import UserDetails
from calorie_tracker.services.session import SessionController


def test_set_get_delete(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "nested" / "state.json")

    assert store.get("userDetails") is None
    store.set("userDetails", '{"height": 175}')
    assert store.get("userDetails") == '{"height": 175}'

    store.delete("userDetails")
    assert store.get("userDetails") is None
    store.delete("userDetails")


def test_values_survive_new_instance(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    JsonFileStore(path).set("foodLogs", "[]")

    assert JsonFileStore(path).get("foodLogs") == "[]"
    assert not path.with_name("state.json.tmp").exists()


def test_unreadable_file_is_cleared(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{broken", encoding="utf-8")
    store = JsonFileStore(path)

    assert store.get("userDetails") is None
    assert path.read_text(encoding="utf-8") == "{}"
    store.set("userDetails", "{}")
    assert store.get("userDetails") == "{}"


def test_session_controller_over_file_store(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    controller = SessionController(JsonFileStore(path))
    controller.load()
    controller.complete_setup(
        UserDetails(
            height=180,
            weight=82,
            age=41,
            gender="male",
            activity_level="active",
            goal="lose",
        )
    )

    restored = SessionController(JsonFileStore(path)).load()

    assert restored.view == "dashboard"
    assert restored.daily_requirements == controller.state.daily_requirements
