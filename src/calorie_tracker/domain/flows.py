"""Domain models for the photo analysis flows.

Each flow state is a frozen dataclass carrying exactly the data that is valid
in that state, so a refinement without a prior analysis cannot be expressed.
"""

from dataclasses import dataclass, field
from typing import ClassVar

from calorie_tracker.domain.analysis import GroceryAnalysis, MealAnalysis
from calorie_tracker.domain.capture import CapturedImage
from calorie_tracker.domain.models import NutritionalInfo


@dataclass(frozen=True)
class Idle:
    """No image is being processed."""

    status: ClassVar[str] = "idle"


@dataclass(frozen=True)
class Analyzing:
    """An image has been sent for analysis."""

    image: CapturedImage
    status: ClassVar[str] = "analyzing"


@dataclass(frozen=True)
class AwaitingAnswers:
    """The model asked clarifying questions about the meal."""

    image: CapturedImage
    analysis: MealAnalysis
    answers: dict[str, str] = field(default_factory=dict)
    status: ClassVar[str] = "awaiting_answers"


@dataclass(frozen=True)
class Refining:
    """Answers have been sent to refine the estimate."""

    image: CapturedImage
    analysis: MealAnalysis
    answers: dict[str, str]
    status: ClassVar[str] = "refining"


@dataclass(frozen=True)
class Complete:
    """Final nutrition is known and can be logged."""

    image: CapturedImage
    analysis: MealAnalysis
    nutrition: NutritionalInfo
    status: ClassVar[str] = "complete"


@dataclass(frozen=True)
class GroceryComplete:
    """Grocery item analysis is ready."""

    image: CapturedImage
    analysis: GroceryAnalysis
    status: ClassVar[str] = "complete"


@dataclass(frozen=True)
class Failed:
    """The last request failed; the user may retry."""

    image: CapturedImage | None
    message: str
    status: ClassVar[str] = "error"


MealFlowState = Idle | Analyzing | AwaitingAnswers | Refining | Complete | Failed
GroceryFlowState = Idle | Analyzing | GroceryComplete | Failed


@dataclass(frozen=True)
class MealEntry:
    """A confirmed meal waiting to be appended to the food log."""

    name: str
    nutrition: NutritionalInfo
    image: str
