"""State machine for the grocery mentor."""

import logging
from dataclasses import dataclass, field

from calorie_tracker.domain.analysis import GroceryAnalysis
from calorie_tracker.domain.capture import CapturedImage
from calorie_tracker.domain.errors import AnalysisError, InvalidTransition
from calorie_tracker.domain.flows import (
    Analyzing,
    Failed,
    GroceryComplete,
    GroceryFlowState,
    Idle,
)
from calorie_tracker.services.analysis import AnalysisService
from calorie_tracker.services.meal_flow import user_message

logger = logging.getLogger(__name__)

GROCERY_FAILED = "Failed to analyze item. Please try again."


def begin_grocery_analysis(state: GroceryFlowState, image: CapturedImage) -> Analyzing:
    if isinstance(state, Analyzing):
        raise InvalidTransition("An analysis is already in progress.")
    return Analyzing(image=image)


def grocery_succeeded(
    state: GroceryFlowState, analysis: GroceryAnalysis
) -> GroceryComplete:
    if not isinstance(state, Analyzing):
        raise InvalidTransition(f"Cannot accept an analysis while {state.status}.")
    return GroceryComplete(image=state.image, analysis=analysis)


def grocery_failed(state: GroceryFlowState, message: str) -> Failed:
    if not isinstance(state, Analyzing):
        raise InvalidTransition(f"Nothing in flight while {state.status}.")
    return Failed(image=state.image, message=message)


@dataclass
class GroceryMentor:
    """Drives grocery item analysis through the analysis service."""

    analysis_service: AnalysisService
    debug_errors: bool = False
    state: GroceryFlowState = field(default_factory=Idle)

    async def analyze(self, image: CapturedImage) -> GroceryFlowState:
        """Send a product photo for ingredient analysis."""
        pending = self.state = begin_grocery_analysis(self.state, image)
        try:
            analysis = await self.analysis_service.analyze_grocery_image(
                image.data, image.mime_type
            )
        except AnalysisError as exc:
            logger.exception("Grocery analysis failed")
            if self.state is pending:
                self.state = grocery_failed(
                    pending, user_message(GROCERY_FAILED, exc, self.debug_errors)
                )
            return self.state
        if self.state is pending:
            self.state = grocery_succeeded(pending, analysis)
        return self.state

    def reset(self) -> GroceryFlowState:
        self.state = Idle()
        return self.state
