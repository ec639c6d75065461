"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.models import (
    AnswersPayload,
    DashboardResponse,
    FlowResponse,
    ImagePayload,
    SessionResponse,
)
from calorie_tracker.api.page import router as page_router
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.errors import (
    CaptureError,
    InvalidTransition,
    ProfileValidationError,
)
from calorie_tracker.domain.models import DailyRequirements, FoodLog, UserDetails
from calorie_tracker.domain.stats import DashboardTab
from calorie_tracker.services.capture import capture_from_payload
from calorie_tracker.services.stats import build_dashboard


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    state = container.session_controller.load()
    logger.info("Session loaded in %s view", state.view)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(page_router)

    @app.exception_handler(ProfileValidationError)
    async def profile_error(
        request: Request, exc: ProfileValidationError
    ) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, exc)

    @app.exception_handler(CaptureError)
    async def capture_error(request: Request, exc: CaptureError) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, exc)

    @app.exception_handler(InvalidTransition)
    async def transition_error(
        request: Request, exc: InvalidTransition
    ) -> JSONResponse:
        return _error_response(status.HTTP_409_CONFLICT, exc)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/session")
    async def get_session(request: Request) -> SessionResponse:
        """Return the current view and stored profile."""
        state_container: AppContainer = request.app.state.container
        return SessionResponse.from_state(state_container.session_controller.state)

    @app.post("/api/setup")
    async def setup(details: UserDetails, request: Request) -> DailyRequirements:
        """Compute and store daily requirements for a new profile."""
        state_container: AppContainer = request.app.state.container
        return state_container.session_controller.complete_setup(details)

    @app.post("/api/reset")
    async def reset(request: Request) -> SessionResponse:
        """Clear the profile, requirements, logs and any open flows."""
        state_container: AppContainer = request.app.state.container
        state_container.session_controller.reset()
        state_container.meal_logger.reset()
        state_container.grocery_mentor.reset()
        return SessionResponse.from_state(state_container.session_controller.state)

    @app.get("/api/dashboard")
    async def dashboard(
        request: Request, tab: DashboardTab = DashboardTab.TODAY
    ) -> DashboardResponse:
        """Return today's summary with the selected tab's logs and chart."""
        state_container: AppContainer = request.app.state.container
        view = build_dashboard(
            state_container.session_controller.state,
            tab,
            datetime.now(tz=state_container.timezone),
        )
        return DashboardResponse.from_view(view)

    @app.get("/api/meal")
    async def meal_state(request: Request) -> FlowResponse:
        """Return the meal logger state."""
        state_container: AppContainer = request.app.state.container
        return FlowResponse.from_state(state_container.meal_logger.state)

    @app.post("/api/meal/analyze")
    async def analyze_meal(payload: ImagePayload, request: Request) -> FlowResponse:
        """Analyze a meal photo and return estimate and questions."""
        state_container: AppContainer = request.app.state.container
        image = capture_from_payload(payload.image, payload.mime_type)
        flow_state = await state_container.meal_logger.analyze(image)
        return FlowResponse.from_state(flow_state)

    @app.post("/api/meal/answers")
    async def answer_questions(
        payload: AnswersPayload, request: Request
    ) -> FlowResponse:
        """Record answers to clarifying questions."""
        state_container: AppContainer = request.app.state.container
        flow_state = state_container.meal_logger.answer(payload.answers)
        return FlowResponse.from_state(flow_state)

    @app.post("/api/meal/refine")
    async def refine_meal(request: Request) -> FlowResponse:
        """Refine the estimate using the recorded answers."""
        state_container: AppContainer = request.app.state.container
        flow_state = await state_container.meal_logger.refine()
        return FlowResponse.from_state(flow_state)

    @app.post("/api/meal/confirm")
    async def confirm_meal(request: Request) -> FoodLog:
        """Add the completed meal to the food log."""
        state_container: AppContainer = request.app.state.container
        entry = state_container.meal_logger.completed_entry()
        food_log = state_container.session_controller.add_food_log(
            name=entry.name,
            nutrition=entry.nutrition,
            image=entry.image,
        )
        state_container.meal_logger.reset()
        logger.info(
            "Logged meal %s (%s kcal)", food_log.name, food_log.nutrition.calories
        )
        return food_log

    @app.post("/api/meal/reset")
    async def reset_meal(request: Request) -> FlowResponse:
        """Discard the current meal analysis."""
        state_container: AppContainer = request.app.state.container
        return FlowResponse.from_state(state_container.meal_logger.reset())

    @app.get("/api/grocery")
    async def grocery_state(request: Request) -> FlowResponse:
        """Return the grocery mentor state."""
        state_container: AppContainer = request.app.state.container
        return FlowResponse.from_state(state_container.grocery_mentor.state)

    @app.post("/api/grocery/analyze")
    async def analyze_grocery(
        payload: ImagePayload, request: Request
    ) -> FlowResponse:
        """Analyze a packaged food photo."""
        state_container: AppContainer = request.app.state.container
        image = capture_from_payload(payload.image, payload.mime_type)
        flow_state = await state_container.grocery_mentor.analyze(image)
        return FlowResponse.from_state(flow_state)

    @app.post("/api/grocery/reset")
    async def reset_grocery(request: Request) -> FlowResponse:
        """Discard the current grocery analysis."""
        state_container: AppContainer = request.app.state.container
        return FlowResponse.from_state(state_container.grocery_mentor.reset())

    return app


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})
