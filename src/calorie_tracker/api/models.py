"""Pydantic models for API requests and responses."""

from pydantic import Field

from calorie_tracker.domain.analysis import GroceryAnalysis, MealAnalysis
from calorie_tracker.domain.flows import (
    AwaitingAnswers,
    Complete,
    Failed,
    GroceryComplete,
    GroceryFlowState,
    MealFlowState,
    Refining,
)
from calorie_tracker.domain.models import (
    CamelModel,
    DailyRequirements,
    FoodLog,
    NutritionalInfo,
    SessionState,
    UserDetails,
)
from calorie_tracker.domain.stats import ChartBucket, DashboardTab
from calorie_tracker.services.stats import DashboardView


class ImagePayload(CamelModel):
    """Captured image as a data URL or bare base64 string."""

    image: str = Field(min_length=1)
    mime_type: str | None = None


class AnswersPayload(CamelModel):
    """Answers to clarifying questions keyed by question text."""

    answers: dict[str, str]


class SessionResponse(CamelModel):
    """Current view with the stored profile, if any."""

    view: str
    user_details: UserDetails | None = None
    daily_requirements: DailyRequirements | None = None

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionResponse":
        return cls(
            view=state.view,
            user_details=state.user_details,
            daily_requirements=state.daily_requirements,
        )


class ChartBucketResponse(CamelModel):
    """Single chart bar."""

    name: str
    calories: int
    protein: int
    carbs: int
    fat: int

    @classmethod
    def from_bucket(cls, bucket: ChartBucket) -> "ChartBucketResponse":
        return cls(
            name=bucket.label,
            calories=bucket.calories,
            protein=bucket.protein,
            carbs=bucket.carbs,
            fat=bucket.fat,
        )


class DashboardResponse(CamelModel):
    """Dashboard summary, log list and chart for one tab."""

    tab: DashboardTab
    daily_requirements: DailyRequirements
    today: NutritionalInfo
    logs: list[FoodLog]
    chart: list[ChartBucketResponse]

    @classmethod
    def from_view(cls, view: DashboardView) -> "DashboardResponse":
        return cls(
            tab=view.tab,
            daily_requirements=view.requirements,
            today=view.today,
            logs=view.logs,
            chart=[ChartBucketResponse.from_bucket(bucket) for bucket in view.chart],
        )


class FlowResponse(CamelModel):
    """Serializable snapshot of an analysis flow."""

    status: str
    image: str | None = None
    error: str | None = None
    meal: MealAnalysis | None = None
    answers: dict[str, str] | None = None
    nutrition: NutritionalInfo | None = None
    grocery: GroceryAnalysis | None = None

    @classmethod
    def from_state(cls, state: MealFlowState | GroceryFlowState) -> "FlowResponse":
        response = cls(status=state.status)
        image = getattr(state, "image", None)
        if image is not None:
            response.image = image.data_url
        if isinstance(state, Failed):
            response.error = state.message
        if isinstance(state, AwaitingAnswers | Refining | Complete):
            response.meal = state.analysis
        if isinstance(state, AwaitingAnswers | Refining):
            response.answers = dict(state.answers)
        if isinstance(state, Complete):
            response.nutrition = state.nutrition
        if isinstance(state, GroceryComplete):
            response.grocery = state.analysis
        return response
