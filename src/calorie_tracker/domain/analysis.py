"""Models for AI analysis results."""

from typing import Literal

from calorie_tracker.domain.models import CamelModel, NutritionalInfo


class AIQuestion(CamelModel):
    """Multiple-choice question used to clarify how a dish was prepared."""

    question: str
    options: list[str]


class MealAnalysis(CamelModel):
    """Structured output for meal image analysis."""

    dish_name: str
    estimated_nutrition: NutritionalInfo
    clarifying_questions: list[AIQuestion]


class IngredientAnalysis(CamelModel):
    """Health classification of a single ingredient."""

    name: str
    health_impact: Literal["good", "neutral", "bad"]
    explanation: str


class GroceryAnalysis(CamelModel):
    """Structured output for packaged food analysis."""

    item_name: str
    health_mentor_summary: str
    ingredients: list[IngredientAnalysis]
    healthy_alternatives: list[str]
