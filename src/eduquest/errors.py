"""Domain exceptions raised by services and rendered by the global error handler."""

from __future__ import annotations


class EduQuestError(Exception):
    """Base class for domain errors. Carries the HTTP status used to report it."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(EduQuestError):
    """Malformed or missing input."""

    status_code = 400


class AuthenticationError(EduQuestError):
    status_code = 401


class ForbiddenError(EduQuestError):
    """Acting on a resource the caller does not own or may not touch."""

    status_code = 403


class NotFoundError(EduQuestError):
    status_code = 404


class ConflictError(EduQuestError):
    """Duplicate resource or an illegal state transition."""

    status_code = 409
