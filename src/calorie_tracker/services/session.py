"""Session controller that owns the persisted application state."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from pydantic import TypeAdapter, ValidationError

from calorie_tracker.domain.errors import InvalidTransition
from calorie_tracker.domain.models import (
    DailyRequirements,
    FoodLog,
    NutritionalInfo,
    SessionState,
    UserDetails,
)
from calorie_tracker.services.requirements import (
    compute_requirements,
    validate_details,
)
from calorie_tracker.services.stats import to_epoch_ms

logger = logging.getLogger(__name__)

USER_DETAILS_KEY = "userDetails"
DAILY_REQUIREMENTS_KEY = "dailyRequirements"
FOOD_LOGS_KEY = "foodLogs"
STATE_KEYS = (USER_DETAILS_KEY, DAILY_REQUIREMENTS_KEY, FOOD_LOGS_KEY)

_FOOD_LOGS = TypeAdapter(list[FoodLog])


class StateStore(Protocol):
    """Key/value store holding JSON strings."""

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value under a key."""

    def delete(self, key: str) -> None:
        """Remove a key if present."""


@dataclass
class SessionController:
    """Loads, mutates and saves the single user's session state."""

    store: StateStore
    state: SessionState = field(default_factory=SessionState)

    def load(self) -> SessionState:
        """Restore state from the store, wiping it if any value is corrupt."""
        raw_details = self.store.get(USER_DETAILS_KEY)
        raw_requirements = self.store.get(DAILY_REQUIREMENTS_KEY)
        raw_logs = self.store.get(FOOD_LOGS_KEY)
        if not raw_details or not raw_requirements:
            self.state = SessionState()
            return self.state
        try:
            self.state = SessionState(
                user_details=UserDetails.model_validate_json(raw_details),
                daily_requirements=DailyRequirements.model_validate_json(
                    raw_requirements
                ),
                food_logs=_FOOD_LOGS.validate_json(raw_logs) if raw_logs else [],
            )
        except ValidationError:
            logger.warning("Stored session state is corrupt; clearing it")
            self._clear_store()
            self.state = SessionState()
        return self.state

    def complete_setup(self, details: UserDetails) -> DailyRequirements:
        """Validate details, derive requirements and persist both."""
        if self.state.view == "dashboard":
            raise InvalidTransition("Profile already set up. Reset it first.")
        validate_details(details)
        requirements = compute_requirements(details)
        self.state.user_details = details
        self.state.daily_requirements = requirements
        self.store.set(USER_DETAILS_KEY, details.model_dump_json(by_alias=True))
        self.store.set(
            DAILY_REQUIREMENTS_KEY, requirements.model_dump_json(by_alias=True)
        )
        logger.info("Profile set up with %s kcal target", requirements.calories)
        return requirements

    def add_food_log(
        self,
        name: str,
        nutrition: NutritionalInfo,
        image: str,
        now: datetime | None = None,
    ) -> FoodLog:
        """Append a new log entry and persist the whole collection."""
        if self.state.view != "dashboard":
            raise InvalidTransition("Complete setup before logging meals.")
        food_log = FoodLog(
            id=str(uuid4()),
            name=name,
            timestamp=to_epoch_ms(now or datetime.now(tz=UTC)),
            nutrition=nutrition,
            image=image,
        )
        self.state.food_logs.append(food_log)
        self.store.set(
            FOOD_LOGS_KEY,
            _FOOD_LOGS.dump_json(self.state.food_logs, by_alias=True).decode(),
        )
        return food_log

    def reset(self) -> None:
        """Clear the profile, requirements and every food log."""
        self._clear_store()
        self.state = SessionState()
        logger.info("Profile reset")

    def _clear_store(self) -> None:
        for key in STATE_KEYS:
            self.store.delete(key)
