from __future__ import annotations

from typing import Optional


class PlannerError(Exception):
    """Base class for every error raised by the day planner."""


class ConfigurationError(PlannerError):
    pass


class ExtractionError(PlannerError):
    """The text-generation backend failed or returned unusable output.

    Aborts a whole submission.
    """


class ParseError(ExtractionError):
    """No well-formed JSON block, or the block is not a list of tasks."""


class ProfileError(PlannerError):
    """The owner has no resolvable display name / primary email."""


class CalendarError(PlannerError):
    pass


class ImageGenerationError(PlannerError):
    def __init__(self, message: str, body: Optional[str] = None):
        super().__init__(message)
        self.body = body


class ImageGenerationTimeout(ImageGenerationError, TimeoutError):
    pass


class PersistenceError(PlannerError):
    pass


class TaskNotFoundError(PersistenceError):
    pass
