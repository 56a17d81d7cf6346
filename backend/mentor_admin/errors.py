from __future__ import annotations
from typing import Any


class ConsoleError(Exception):
    """
    Base for domain errors raised by services.

    Each subclass carries a stable `code` and the HTTP status the API answers
    with. `details` holds whatever the caller needs to fix the request.
    """
    code = "CONSOLE_ERROR"
    status_code = 400

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


# ---------- validation (caller-correctable) ----------

class ValidationFailure(ConsoleError):
    status_code = 422


class SchemaMismatch(ValidationFailure):
    code = "SCHEMA_MISMATCH"


class MissingContent(ValidationFailure):
    code = "MISSING_CONTENT"


class InvalidStatus(ValidationFailure):
    code = "INVALID_STATUS"


class ScoreOutOfRange(ValidationFailure):
    code = "SCORE_OUT_OF_RANGE"


class NoteTooLong(ValidationFailure):
    code = "NOTE_TOO_LONG"


# ---------- state (violated invariant) ----------

class StateConflict(ConsoleError):
    status_code = 409


class DuplicateBadge(StateConflict):
    code = "DUPLICATE_BADGE"


class BadgeRequired(StateConflict):
    code = "BADGE_REQUIRED"


class DrawAlreadyExists(StateConflict):
    code = "DRAW_ALREADY_EXISTS"


class NoEligibleTeens(StateConflict):
    code = "NO_ELIGIBLE_TEENS"


class DuplicateChallenge(StateConflict):
    code = "DUPLICATE_CHALLENGE"


# ---------- not found ----------

class NotFound(ConsoleError):
    status_code = 404
    code = "NOT_FOUND"


class ChallengeNotFound(NotFound):
    code = "CHALLENGE_NOT_FOUND"


class TaskNotFound(NotFound):
    code = "TASK_NOT_FOUND"


class SubmissionNotFound(NotFound):
    code = "SUBMISSION_NOT_FOUND"


class TeenNotFound(NotFound):
    code = "TEEN_NOT_FOUND"
