"""Daily calorie and macro targets from body metrics."""

from calorie_tracker.domain.errors import ProfileValidationError
from calorie_tracker.domain.models import DailyRequirements, UserDetails, round_half_up

ACTIVITY_MULTIPLIERS: dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}

GOAL_ADJUSTMENTS: dict[str, float] = {
    "lose": -500,
    "maintain": 0,
    "gain": 500,
}

CARBS_SHARE = 0.40
PROTEIN_SHARE = 0.30
FAT_SHARE = 0.30
KCAL_PER_G_CARBS = 4
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_FAT = 9


def validate_details(details: UserDetails) -> None:
    """Reject non-positive height, weight or age."""
    if details.height <= 0 or details.weight <= 0 or details.age <= 0:
        raise ProfileValidationError("Please enter valid height, weight, and age.")


def basal_metabolic_rate(details: UserDetails) -> float:
    """Revised Harris-Benedict BMR in kcal/day."""
    if details.gender == "male":
        return (
            88.362
            + 13.397 * details.weight
            + 4.799 * details.height
            - 5.677 * details.age
        )
    return (
        447.593 + 9.247 * details.weight + 3.098 * details.height - 4.330 * details.age
    )


def target_calories(details: UserDetails) -> float:
    """Return unrounded daily calories adjusted for activity and goal."""
    tdee = basal_metabolic_rate(details) * ACTIVITY_MULTIPLIERS[details.activity_level]
    return max(tdee + GOAL_ADJUSTMENTS[details.goal], 0.0)


def compute_requirements(details: UserDetails) -> DailyRequirements:
    """Split target calories into 40% carbs, 30% protein and 30% fat."""
    calories = target_calories(details)
    return DailyRequirements(
        calories=round_half_up(calories),
        carbohydrates=round_half_up(calories * CARBS_SHARE / KCAL_PER_G_CARBS),
        protein=round_half_up(calories * PROTEIN_SHARE / KCAL_PER_G_PROTEIN),
        fat=round_half_up(calories * FAT_SHARE / KCAL_PER_G_FAT),
        portion_size="",
    )
