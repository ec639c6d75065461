"""State machine for photo-based meal logging."""

import logging
from dataclasses import dataclass, field, replace

from calorie_tracker.domain.analysis import MealAnalysis
from calorie_tracker.domain.capture import CapturedImage
from calorie_tracker.domain.errors import AnalysisError, InvalidTransition
from calorie_tracker.domain.flows import (
    Analyzing,
    AwaitingAnswers,
    Complete,
    Failed,
    Idle,
    MealEntry,
    MealFlowState,
    Refining,
)
from calorie_tracker.domain.models import NutritionalInfo
from calorie_tracker.services.analysis import AnalysisService

logger = logging.getLogger(__name__)

ANALYZE_FAILED = "Failed to analyze image. Please try again."
REFINE_FAILED = "Failed to refine analysis. Please try again."


def begin_analysis(state: MealFlowState, image: CapturedImage) -> Analyzing:
    if isinstance(state, Analyzing | Refining):
        raise InvalidTransition("An analysis is already in progress.")
    return Analyzing(image=image)


def analysis_succeeded(
    state: MealFlowState, analysis: MealAnalysis
) -> AwaitingAnswers | Complete:
    if not isinstance(state, Analyzing):
        raise InvalidTransition(f"Cannot accept an analysis while {state.status}.")
    if analysis.clarifying_questions:
        return AwaitingAnswers(image=state.image, analysis=analysis)
    return Complete(
        image=state.image,
        analysis=analysis,
        nutrition=analysis.estimated_nutrition,
    )


def record_answer(state: MealFlowState, question: str, option: str) -> AwaitingAnswers:
    if not isinstance(state, AwaitingAnswers):
        raise InvalidTransition(f"No questions to answer while {state.status}.")
    asked = {q.question: q.options for q in state.analysis.clarifying_questions}
    if question not in asked:
        raise InvalidTransition(f"Unknown question: {question}")
    if option not in asked[question]:
        raise InvalidTransition(f"Unknown option for {question}: {option}")
    return replace(state, answers={**state.answers, question: option})


def begin_refining(state: MealFlowState) -> Refining:
    if not isinstance(state, AwaitingAnswers):
        raise InvalidTransition(f"Cannot refine while {state.status}.")
    return Refining(image=state.image, analysis=state.analysis, answers=state.answers)


def refinement_succeeded(state: MealFlowState, nutrition: NutritionalInfo) -> Complete:
    if not isinstance(state, Refining):
        raise InvalidTransition(f"Cannot accept a refinement while {state.status}.")
    return Complete(image=state.image, analysis=state.analysis, nutrition=nutrition)


def analysis_failed(state: MealFlowState, message: str) -> Failed:
    if not isinstance(state, Analyzing | Refining):
        raise InvalidTransition(f"Nothing in flight while {state.status}.")
    return Failed(image=state.image, message=message)


def user_message(fallback: str, exc: Exception, debug: bool) -> str:
    """Return a user-facing error message with local debug info."""
    if debug:
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


@dataclass
class MealLogger:
    """Drives the meal flow through the analysis service."""

    analysis_service: AnalysisService
    debug_errors: bool = False
    state: MealFlowState = field(default_factory=Idle)

    async def analyze(self, image: CapturedImage) -> MealFlowState:
        """Send a new photo for analysis."""
        pending = self.state = begin_analysis(self.state, image)
        try:
            analysis = await self.analysis_service.analyze_meal_image(
                image.data, image.mime_type
            )
        except AnalysisError as exc:
            logger.exception("Meal analysis failed")
            if self.state is pending:
                self.state = analysis_failed(
                    pending, user_message(ANALYZE_FAILED, exc, self.debug_errors)
                )
            return self.state
        # A reset while the request was in flight discards its result.
        if self.state is pending:
            self.state = analysis_succeeded(pending, analysis)
        return self.state

    def answer(self, answers: dict[str, str]) -> MealFlowState:
        """Record answers to one or more clarifying questions."""
        state = self.state
        for question, option in answers.items():
            state = record_answer(state, question, option)
        self.state = state
        return self.state

    async def refine(self) -> MealFlowState:
        """Refine the estimate with the recorded answers."""
        pending = self.state = begin_refining(self.state)
        try:
            nutrition = await self.analysis_service.refine_meal_nutrition(
                pending.analysis.dish_name,
                pending.answers,
                pending.analysis.estimated_nutrition,
            )
        except AnalysisError as exc:
            logger.exception("Meal refinement failed")
            if self.state is pending:
                self.state = analysis_failed(
                    pending, user_message(REFINE_FAILED, exc, self.debug_errors)
                )
            return self.state
        if self.state is pending:
            self.state = refinement_succeeded(pending, nutrition)
        return self.state

    def completed_entry(self) -> MealEntry:
        """Return the meal to log; only valid once the flow is complete."""
        if not isinstance(self.state, Complete):
            raise InvalidTransition("Nothing to log yet.")
        return MealEntry(
            name=self.state.analysis.dish_name,
            nutrition=self.state.nutrition,
            image=self.state.image.data_url,
        )

    def reset(self) -> MealFlowState:
        self.state = Idle()
        return self.state
