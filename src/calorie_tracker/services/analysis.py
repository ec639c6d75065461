"""AI analysis of meal and grocery photos using LLMs."""

import logging
from dataclasses import dataclass
from typing import Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from calorie_tracker.domain.analysis import GroceryAnalysis, MealAnalysis
from calorie_tracker.domain.capture import to_data_url
from calorie_tracker.domain.errors import AnalysisError
from calorie_tracker.domain.models import NutritionalInfo

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

NUTRITION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "calories": {
            "type": "number",
            "minimum": 0,
            "description": "Estimated calories in kcal.",
        },
        "protein": {
            "type": "number",
            "minimum": 0,
            "description": "Estimated protein in grams.",
        },
        "carbohydrates": {
            "type": "number",
            "minimum": 0,
            "description": "Estimated carbohydrates in grams.",
        },
        "fat": {
            "type": "number",
            "minimum": 0,
            "description": "Estimated fat in grams.",
        },
        "portionSize": {
            "type": "string",
            "description": 'Estimated portion size, e.g. "1 cup" or "approx. 200g".',
        },
    },
    "required": ["calories", "protein", "carbohydrates", "fat", "portionSize"],
    "additionalProperties": False,
}

MEAL_ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "dishName": {
            "type": "string",
            "description": "The name of the identified dish.",
        },
        "estimatedNutrition": NUTRITION_SCHEMA,
        "clarifyingQuestions": {
            "type": "array",
            "description": (
                "2-3 simple multiple-choice questions that clarify preparation "
                "methods with a large nutritional impact."
            ),
            "items": {
                "type": "object",
                "properties": {
                    "question": {"type": "string"},
                    "options": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["question", "options"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["dishName", "estimatedNutrition", "clarifyingQuestions"],
    "additionalProperties": False,
}

GROCERY_ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "itemName": {
            "type": "string",
            "description": "The name of the grocery item.",
        },
        "healthMentorSummary": {
            "type": "string",
            "description": (
                "A friendly, conversational summary about the item's "
                "healthiness and advice for the user."
            ),
        },
        "ingredients": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "healthImpact": {
                        "type": "string",
                        "enum": ["good", "neutral", "bad"],
                    },
                    "explanation": {
                        "type": "string",
                        "description": "Why the ingredient has that health impact.",
                    },
                },
                "required": ["name", "healthImpact", "explanation"],
                "additionalProperties": False,
            },
        },
        "healthyAlternatives": {
            "type": "array",
            "items": {"type": "string"},
            "description": "2-3 healthier alternative products or homemade options.",
        },
    },
    "required": [
        "itemName",
        "healthMentorSummary",
        "ingredients",
        "healthyAlternatives",
    ],
    "additionalProperties": False,
}

MEAL_PROMPT = (
    "Analyze this food image. Identify the dish, its main ingredients and "
    "estimate its portion size (e.g. 'approx. 250g' or '1 medium bowl'). "
    "Provide an estimated nutritional breakdown. Also generate 2-3 simple "
    "multiple-choice questions to clarify preparation methods that significantly "
    "impact nutrition, for example 'How was this prepared? (Deep-fried, "
    "Pan-fried, Air-fried, Baked)' or 'Were any sugary sauces or dressings "
    "added? (Yes, No, A little)'. Return the analysis and the questions in the "
    "specified JSON format."
)

GROCERY_PROMPT = (
    "You are a healthy life mentor. Analyze this image of a packaged food item. "
    "Identify the product name. List its key ingredients from the label if "
    "visible, or infer them if not. For each key ingredient, classify its health "
    "impact as 'good', 'neutral', or 'bad' and give a brief explanation. Provide "
    "an overall summary as a health mentor, advising the user on whether to buy "
    "it. Finally, suggest 2-3 healthier alternative products or homemade "
    "options. Return the result in the specified JSON format."
)


class AnalysisClient(Protocol):
    """Interface for structured LLM calls."""

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
        """Return the parsed JSON object produced by the model."""


@dataclass
class AnalysisService:
    """Service that prepares analysis prompts and validates results."""

    client: AnalysisClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze_meal_image(
        self, image_bytes: bytes, mime_type: str
    ) -> MealAnalysis:
        """Identify a dish, estimate its nutrition and ask clarifying questions."""
        raw = await self._generate(
            prompt=MEAL_PROMPT,
            schema_name="meal_analysis",
            schema=MEAL_ANALYSIS_SCHEMA,
            image_data_url=to_data_url(image_bytes, mime_type),
        )
        return _parse(MealAnalysis, raw)

    async def refine_meal_nutrition(
        self,
        dish_name: str,
        answers: dict[str, str],
        prior: NutritionalInfo,
    ) -> NutritionalInfo:
        """Refine a previous estimate using the user's answers."""
        raw = await self._generate(
            prompt=build_refine_prompt(dish_name, answers, prior),
            schema_name="meal_nutrition",
            schema=NUTRITION_SCHEMA,
        )
        return _parse(NutritionalInfo, raw)

    async def analyze_grocery_image(
        self, image_bytes: bytes, mime_type: str
    ) -> GroceryAnalysis:
        """Score a packaged item's ingredients and suggest alternatives."""
        raw = await self._generate(
            prompt=GROCERY_PROMPT,
            schema_name="grocery_analysis",
            schema=GROCERY_ANALYSIS_SCHEMA,
            image_data_url=to_data_url(image_bytes, mime_type),
        )
        return _parse(GroceryAnalysis, raw)

    async def _generate(
        self,
        *,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        return await self.client.generate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=prompt,
            schema_name=schema_name,
            schema=schema,
            image_data_url=image_data_url,
        )


def build_refine_prompt(
    dish_name: str, answers: dict[str, str], prior: NutritionalInfo
) -> str:
    """Build the follow-up instruction for a refined estimate."""
    user_answers = "\n".join(
        f"- {question} -> {answer}" for question, answer in answers.items()
    )
    return (
        f'Based on the previous analysis of "{dish_name}" which had an initial '
        f"estimate of {prior.model_dump_json(by_alias=True)}, refine the "
        "nutritional estimate considering the following user answers:\n"
        f"{user_answers}\n"
        "Provide an updated, final nutritional breakdown in the specified JSON "
        "format. Only return the JSON object. Keep the portion size the same."
    )


def _parse(model: type[_ModelT], raw: dict[str, object]) -> _ModelT:
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        logger.error("AI response did not match %s: %s", model.__name__, raw)
        raise AnalysisError("Received invalid data from AI. Please try again.") from exc
