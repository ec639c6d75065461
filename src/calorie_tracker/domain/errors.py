"""Error types shared across the application."""


class CalorieTrackerError(Exception):
    """Base class for application errors."""


class ProfileValidationError(CalorieTrackerError):
    """Raised when user-entered body metrics are not usable."""


class InvalidTransition(CalorieTrackerError):
    """Raised when an action is not allowed in the current state."""


class AnalysisError(CalorieTrackerError):
    """Raised when the AI analysis call fails or returns unusable data."""


class CaptureError(CalorieTrackerError):
    """Raised when a captured image cannot be decoded."""
