"""Errors raised by the quiz components.

Routes let these propagate; the handlers registered in ``main.py`` turn them
into ``{"error": message}`` responses with the matching status code.
"""


class QuizError(Exception):
    """Base class for quiz errors."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(QuizError):
    """Malformed request or an operation the session state does not allow."""
    status_code = 400


class AccessDenied(QuizError):
    """The user's tier does not cover the requested quiz type."""
    status_code = 403


class NotFound(QuizError):
    """Unknown session or results."""
    status_code = 404


class PoolUnavailable(QuizError):
    """The question store could not be reached."""
    status_code = 500


class InternalError(QuizError):
    """Store or upstream failure."""
    status_code = 500
